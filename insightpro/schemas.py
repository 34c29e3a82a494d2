from pydantic import BaseModel, ConfigDict, Field

# Request fields are optional at the schema level: presence (and blankness)
# is checked by the services so the HTTP and direct-call paths report the
# same ValidationError.


# --- Account ---

class RegisterRequest(BaseModel):
    email: str | None = Field(None, max_length=255)
    password: str | None = None
    company: str | None = Field(None, max_length=255)


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class TokenResponse(BaseModel):
    token: str
    company: str


# --- Comment ---

class CommentResponse(BaseModel):
    id: int
    text: str
    model_config = ConfigDict(from_attributes=True)


# --- Product ---

class ProductCreate(BaseModel):
    name: str | None = Field(None, max_length=255)
    company: str | None = Field(None, max_length=255)
    average_rating: float | None = None
    comments: list[str] | None = None


class ProductUpdate(BaseModel):
    """Partial update: only fields present (and not null) in the body are written."""

    name: str | None = Field(None, max_length=255)
    company: str | None = Field(None, max_length=255)
    average_rating: float | None = None


class ProductResponse(BaseModel):
    id: int
    name: str
    company: str
    average_rating: float
    comments: list[CommentResponse] = []
    model_config = ConfigDict(from_attributes=True)


# --- Generic ---

class MessageResponse(BaseModel):
    message: str


# --- Metrics ---

class MetricsResponse(BaseModel):
    total_accounts: int
    total_products: int
    total_comments: int
    products_without_comments: int
    avg_comments_per_product: float
    avg_rating: float | None = None
    products_by_company: dict[str, int] = {}
    cache_info: dict = {}
