from typing import Tuple
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

class Chapter(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    start_sec: int = Field(ge=0)
    end_sec: int
    summary: str = ""

    @model_validator(mode="after")
    def _check_bounds(self):
        if self.end_sec <= self.start_sec:
            raise ValueError(f"chapter {self.id} ends at {self.end_sec}s, not after its start {self.start_sec}s")
        return self

class SummaryOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    context: str
    chapters: Tuple[Chapter, ...]
    llm_used: bool
