from pydantic import BaseModel


class SearchItem(BaseModel):
    """One web search hit, decoded from whichever provider answered."""
    title: str = ""
    url: str
    snippet: str = ""

    @classmethod
    def from_google(cls, item: dict) -> "SearchItem":
        return cls(
            title=item.get("title") or "",
            url=item["link"],
            snippet=item.get("snippet") or "",
        )

    @classmethod
    def from_tavily(cls, item: dict) -> "SearchItem":
        return cls(
            title=item.get("title") or "",
            url=item["url"],
            snippet=item.get("content") or "",
        )
