from idscan.infrastructure.extraction.rules import (
    ExtractionContext,
    RuleKind,
    derived_rule,
    line_rule,
    pattern_rule,
    run_cascade,
)


class TestExtractionContext:

    def test_text_is_collapsed(self):
        ctx = ExtractionContext.from_raw("  姓名\t张三\n\n性别   男  ")
        assert ctx.text == "姓名 张三 性别 男"

    def test_lines_are_kept_separately(self):
        ctx = ExtractionContext.from_raw("张三\n\n  性别   男 \n")
        assert ctx.lines == ("张三", "性别 男")

    def test_found_starts_empty(self):
        assert ExtractionContext.from_raw("x").found == {}


class TestRules:

    def test_pattern_rule_returns_groups(self):
        rule = pattern_rule("R1", r"(\d+)-(\d+)")
        assert rule.kind is RuleKind.PATTERN
        assert rule.apply(ExtractionContext.from_raw("a 12-34 b")) == ("12", "34")

    def test_pattern_rule_no_match(self):
        rule = pattern_rule("R1", r"(\d+)")
        assert rule.apply(ExtractionContext.from_raw("abc")) is None

    def test_line_rule_returns_first_matching_line(self):
        rule = line_rule("L1", lambda line: line.startswith("b"))
        ctx = ExtractionContext.from_raw("apple\nbanana\nberry")
        assert rule.apply(ctx) == ("banana",)

    def test_derived_rule_reads_found_fields(self):
        rule = derived_rule("D1", lambda found: found.get("a"))
        ctx = ExtractionContext.from_raw("text")
        assert rule.apply(ctx) is None
        ctx.found["a"] = "value"
        assert rule.apply(ctx) == ("value",)


class TestCascade:

    def test_first_match_wins(self):
        rules = (
            pattern_rule("MISS", r"(zzz)"),
            pattern_rule("FIRST", r"(a+)"),
            pattern_rule("SECOND", r"(b+)"),
        )
        assert run_cascade(rules, ExtractionContext.from_raw("aa bb")) == ("FIRST", ("aa",))

    def test_empty_capture_still_wins(self):
        rules = (
            pattern_rule("EMPTY", r"label(\d*)"),
            pattern_rule("LATER", r"(\d+)"),
        )
        assert run_cascade(rules, ExtractionContext.from_raw("label 42")) == ("EMPTY", ("",))

    def test_no_rule_matches(self):
        rules = (pattern_rule("R", r"(\d+)"),)
        assert run_cascade(rules, ExtractionContext.from_raw("none")) is None
