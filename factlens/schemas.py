from pydantic import BaseModel, ConfigDict, Field
from typing import Literal, List, Optional, Tuple


Rating = Literal["True", "False", "Misleading", "Unverifiable"]
RATINGS = ("True", "False", "Misleading", "Unverifiable")


class FactCheckRequest(BaseModel):
    text: Optional[str] = Field(None, description="Текст для проверки")
    url: Optional[str] = Field(None, description="Страница, основной текст которой нужно проверить")
    images: Optional[List[str]] = Field(
        None, description="Изображения в base64, с префиксом data:...;base64, или без"
    )


class FactCheckResult(BaseModel):
    # Имена полей совпадают с JSON-контрактом фронта и расширения
    model_config = ConfigDict(frozen=True)

    rating: Rating
    explanation: str = Field(..., min_length=1)
    analyzedText: str = Field(..., min_length=1)
    verificationSources: Tuple[str, ...] = ()


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
