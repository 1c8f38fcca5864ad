from pydantic import BaseModel, ConfigDict


class Page(BaseModel):
    model_config = ConfigDict(frozen=True)

    page: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit
