"""Sample pipeline steps referenced by project files in tests."""

NOT_CALLABLE = "just a string"


def strip_comments(unit, settings):
    """Drop Lua line comments, keeping the first line if settings ask for it."""
    lines = unit.content.splitlines()
    keep_first = bool(settings and settings.get("keep_headers"))
    kept = [
        line for index, line in enumerate(lines)
        if not line.lstrip().startswith("--") or (keep_first and index == 0)
    ]
    unit.content = "\n".join(kept)


def reject_tabs(unit, settings):
    if "\t" in unit.content:
        raise ValueError("tabs are not allowed")


def exclude(unit, settings):
    unit.should_persist = False


class Namespace:
    @staticmethod
    def upper(unit, settings):
        unit.content = unit.content.upper()
