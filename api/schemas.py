# api/schemas.py

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel

from proofing.models import Category, Lint, Source, Span, Suggestion, SuggestionKind


class SpanSchema(BaseModel):
    start: int
    end: int


class SuggestionSchema(BaseModel):
    text: str
    kind: str = SuggestionKind.REPLACE_WITH.value


class LintSchema(BaseModel):
    span: SpanSchema
    message: str
    kind: str
    kind_pretty: str = ""
    category: str
    problem_text: str
    source: str
    suggestions: List[SuggestionSchema] = []
    rule_id: str = ""

    @classmethod
    def from_lint(cls, lint: Lint) -> "LintSchema":
        return cls(
            span=SpanSchema(start=lint.span.start, end=lint.span.end),
            message=lint.message,
            kind=lint.kind,
            kind_pretty=lint.kind_pretty,
            category=lint.category.value,
            problem_text=lint.problem_text,
            source=lint.source.value,
            suggestions=[SuggestionSchema(text=s.text, kind=s.kind.value) for s in lint.suggestions],
            rule_id=lint.rule_id,
        )

    def to_lint(self) -> Lint:
        return Lint(
            span=Span(self.span.start, self.span.end),
            message=self.message,
            kind=self.kind,
            category=Category(self.category),
            problem_text=self.problem_text,
            source=Source(self.source),
            suggestions=[Suggestion(s.text, SuggestionKind(s.kind)) for s in self.suggestions],
            kind_pretty=self.kind_pretty,
            rule_id=self.rule_id,
        )


class LintRequest(BaseModel):
    text: str
    session_id: Optional[str] = None


class LintResponse(BaseModel):
    lints: List[LintSchema]


class FixRequest(BaseModel):
    text: str
    lints: Optional[List[LintSchema]] = None


class FixResponse(BaseModel):
    text: str
    applied: int
    failed: int
    skipped: int


class NodeSchema(BaseModel):
    kind: str = "#text"
    text: str = ""
    children: List[NodeSchema] = []


NodeSchema.model_rebuild()


class FixDocumentRequest(BaseModel):
    document: NodeSchema
    lints: Optional[List[LintSchema]] = None


class FixDocumentResponse(BaseModel):
    document: NodeSchema
    text: str
    applied: int
    failed: int
    skipped: int


class ImproveRequest(BaseModel):
    text: str
    tone: Optional[str] = None  # friendly | professional | casual


class ImproveResponse(BaseModel):
    available: bool
    text: Optional[str] = None


class EnabledRequest(BaseModel):
    enabled: bool


class SessionLintsResponse(BaseModel):
    session_id: str
    enabled: bool
    lints: List[LintSchema]
