"""
Platform-neutral data types exchanged between the bot core and the chat client.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class InboundMessage:
    """A chat message as seen by the command router."""

    content: str
    author_id: int
    guild_id: int | None
    channel_id: int
    is_text_channel: bool = True
    has_member: bool = True


@dataclass(frozen=True)
class EmbedField:
    """One name/value field of a response."""

    name: str
    value: str
    inline: bool = True


@dataclass(frozen=True)
class CommandOutcome:
    """
    Response payload of one command invocation.

    Either ``description`` or ``fields`` (or both) carry the body; the chat
    client renders it as an embed.
    """

    title: str
    description: str | None = None
    fields: tuple[EmbedField, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {"title": self.title}
        if self.description is not None:
            payload["description"] = self.description
        if self.fields:
            payload["fields"] = [
                {"name": f.name, "value": f.value, "inline": f.inline}
                for f in self.fields
            ]
        return payload
