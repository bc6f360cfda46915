from dataclasses import dataclass, field


@dataclass(frozen=True)
class RenderResult:
    html: str
    tags: list[str] = field(default_factory=list)  # in encounter order, not de-duplicated
    media: dict[str, str] = field(default_factory=dict)  # filename -> source url
