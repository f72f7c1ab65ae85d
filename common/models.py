from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field
from typing import List, Optional, Literal, Union, Any


class Precedent(BaseModel):
    case_name: str = Field(description="The name of the case.")
    citation: str = Field(description="The citation of the case.")
    summary: str = Field(description="A brief summary of the case and its relevance.")
    differences: Optional[str] = Field(
        default=None,
        description="Key differences compared to the input query, if applicable and notable.")


class StructuredLegalInfo(BaseModel):
    laws: List[str] = Field(
        default_factory=list,
        description="A list of potentially applicable laws, sections, or articles.")
    precedents: List[Precedent] = Field(
        default_factory=list, description="A list of relevant past court cases.")
    checklist: List[str] = Field(
        default_factory=list, description="A list of procedural steps or considerations.")


class EnhanceCitationOutput(BaseModel):
    citation: str = Field(description="The full and accurate citation for the case")


class LawsResult(BaseModel):
    laws: List[str] = Field(
        default_factory=list,
        description="Applicable laws, sections, or constitutional articles.")


class PrecedentsResult(BaseModel):
    precedents: List[Precedent] = Field(default_factory=list)
    source_type: str = Field(default="Custom Library",
                             description="Where the precedents were sourced from.")


class ChecklistResult(BaseModel):
    checklist: List[str] = Field(
        default_factory=list, description="Ordered procedural steps.")


class SummaryResult(BaseModel):
    summary: str


class RetrievalSuccess(BaseModel):
    type: Literal["success"] = "success"
    raw_text_response: str


class RetrievalError(BaseModel):
    type: Literal["error"] = "error"
    message: str
    details: Optional[Any] = None


RetrievalResult = Union[RetrievalSuccess, RetrievalError]


class FeedbackSection(str, Enum):
    LAWS = "laws"
    PRECEDENTS = "precedents"
    CHECKLIST = "checklist"
    OVERALL = "overall"


class FeedbackItem(BaseModel):
    id: Optional[str] = None
    query_id: str
    user_id: str
    section: FeedbackSection
    rating: int = Field(ge=1, le=5)  # 1-5 stars
    comments: Optional[str] = None
    timestamp: Optional[datetime] = None


class QueryHistoryEntry(BaseModel):
    id: Optional[str] = None
    user_id: str
    query: str
    laws_result: Optional[LawsResult] = None
    precedents_result: Optional[PrecedentsResult] = None
    checklist_result: Optional[ChecklistResult] = None
    timestamp: Optional[datetime] = None


class AddDocumentOutput(BaseModel):
    message: str
    library_size: int


class NoticeVariant(str, Enum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


class Notice(BaseModel):
    title: str
    description: str
    variant: NoticeVariant = NoticeVariant.DEFAULT


class QueryStatus(str, Enum):
    IDLE = "idle"
    PROCESSING = "processing"
    SUCCESS = "success"
    ERROR = "error"


class UserContext(BaseModel):
    user_id: str
    email: Optional[str] = None
    is_demo: bool = False


# API payloads

class InsightsPayload(BaseModel):
    query: str
    use_custom_library: bool = False


class ParsePayload(BaseModel):
    raw_text: str


class CitationsPayload(BaseModel):
    case_names: List[str]


class CitationsResponse(BaseModel):
    citations: dict


class DocumentPayload(BaseModel):
    document_text: str


class FeedbackPayload(BaseModel):
    query_id: str
    section: FeedbackSection
    rating: Optional[int] = None
    comments: Optional[str] = None


class SessionSnapshot(BaseModel):
    query: str = ""
    status: QueryStatus = QueryStatus.IDLE
    is_processing: bool = False
    laws_result: Optional[LawsResult] = None
    precedents_result: Optional[PrecedentsResult] = None
    checklist_result: Optional[ChecklistResult] = None
    summary_result: Optional[SummaryResult] = None
    history_id: Optional[str] = None
    notices: List[Notice] = Field(default_factory=list)
