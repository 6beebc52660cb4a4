from pydantic import BaseModel, Field

class CommentEntry(BaseModel):
    second: float = Field(ge=0)
    text: str
