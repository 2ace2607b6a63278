import yaml
from dataclasses import dataclass
from typing import List, Optional
from .logger import get_logger
log = get_logger("bridge_admin.validator")


@dataclass
class SyntaxIssue:
    position: int
    message: str
    line: int = 0
    column: int = 0


@dataclass
class Diagnostic:
    start: int
    end: int
    message: str
    severity: str = "error"


def _issue(e: yaml.YAMLError) -> SyntaxIssue:
    if isinstance(e, yaml.MarkedYAMLError):
        mark = e.problem_mark or e.context_mark
        message = e.problem or e.context or str(e)
        if mark is not None:
            return SyntaxIssue(mark.index, message, mark.line, mark.column)
        return SyntaxIssue(0, message)
    if isinstance(e, yaml.reader.ReaderError):
        return SyntaxIssue(e.position, e.reason)
    return SyntaxIssue(0, str(e))


def validate(text: str) -> List[SyntaxIssue]:
    try:
        yaml.safe_load(text)
    except yaml.YAMLError as e:
        log.debug("YAML 校验失败: %s", e)
        return [_issue(e)]
    return []


def diagnostic_for(text: str) -> Optional[Diagnostic]:
    """Map the first syntax issue onto a span of ``text``.

    The span ends at the next whitespace after the reported position, which
    only approximates the offending token.
    """
    issues = validate(text)
    if not issues:
        return None
    first = issues[0]
    start = min(first.position, len(text))
    end = start
    while end < len(text) and not text[end].isspace():
        end += 1
    return Diagnostic(start, end, first.message)


def can_save(text: str, dirty: bool) -> bool:
    return dirty and diagnostic_for(text) is None
