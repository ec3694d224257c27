from typing import Optional

from pydantic import BaseModel


class HATEOASLink(BaseModel):
    rel: str                        # "self", "manager", "create", ...
    href: str                       # path resolved from the route registry
    method: Optional[str] = None    # hint for non-GET affordances ("POST")

    def to_hal(self) -> dict:
        link = {"href": self.href}
        if self.method is not None:
            link["method"] = self.method
        return link
