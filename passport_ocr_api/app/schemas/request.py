from pydantic import BaseModel, Field


class ParseTextRequest(BaseModel):
    text: str = Field(..., description="Recognized text of one passport page")
