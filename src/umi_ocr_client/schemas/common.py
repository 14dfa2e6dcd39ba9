"""Shapes shared by every service answer."""

from typing import Self

from pydantic import BaseModel, ConfigDict

from umi_ocr_client.errors import ApplicationError

SUCCESS_CODE = 100

# [x, y] in image pixels
Point = tuple[int, int]


class RequestOptions(BaseModel):
    """Option dictionaries sent under their dotted service keys."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ServiceResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    code: int

    @property
    def ok(self) -> bool:
        return self.code == SUCCESS_CODE

    def raise_for_code(self) -> Self:
        """Raise ApplicationError unless the service reported success."""
        if not self.ok:
            raise ApplicationError(self.code, str(getattr(self, "data", "")))
        return self
