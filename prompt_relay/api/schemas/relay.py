from pydantic import BaseModel, ConfigDict, Field, StrictStr


GENERIC_ERROR_MESSAGE = "Error generating text"


class PromptRequest(BaseModel):
    # Body of POST /openai/generate-text
    model_config = ConfigDict(extra="ignore")

    prompt: StrictStr = Field(min_length=1)


class ErrorReport(BaseModel):
    # Failure half of a completion result, never carries upstream detail
    status_code: int = 500
    message: str = GENERIC_ERROR_MESSAGE
