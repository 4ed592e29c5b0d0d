"""Structured log message templates for the resolution pipeline.

Hey future me - the pipeline drops things on purpose (a broken link here, a failed Spotify
batch there) and keeps going. Those drops must be LOUD and uniform in the logs, otherwise
"why is my post missing?" becomes archaeology. Every drop goes through one of these:

    🔴 Spotify Album Batch Failed
    ├─ Items: 20
    ├─ Reason: Spotify request failed with status 502
    └─ 💡 Items are dropped from this page and looked up again on the next request

Usage:
    from freshspot.infrastructure.observability.log_messages import LogMessages

    logger.warning(LogMessages.enrichment_failed(item_id="abc123", reason="no images"))
"""

from dataclasses import dataclass


@dataclass
class LogTemplate:
    """A log message with an icon, a title, tree-structured fields and an optional hint."""

    icon: str
    title: str
    fields: dict[str, str]
    hint: str | None = None

    def format(self) -> str:
        lines = [f"{self.icon} {self.title}"]

        field_items = list(self.fields.items())
        for i, (key, value) in enumerate(field_items):
            prefix = "└─" if i == len(field_items) - 1 and not self.hint else "├─"
            lines.append(f"{prefix} {key}: {value}")

        if self.hint:
            lines.append(f"└─ 💡 {self.hint}")

        return "\n".join(lines)


class LogMessages:
    """Collection of standardized log messages for pipeline drops and failures."""

    @staticmethod
    def feed_fetch_failed(url: str, error: str) -> str:
        """Whole request aborted because the forum page could not be fetched."""
        return LogTemplate(
            icon="🔴",
            title="Reddit Feed Fetch Failed",
            fields={"Target": url, "Reason": error},
            hint="Check the subreddit name and Reddit availability (429 = throttled user agent)",
        ).format()

    @staticmethod
    def catalog_batch_failed(kind: str, item_count: int, error: str) -> str:
        """A bulk lookup or search failed, its items are dropped."""
        return LogTemplate(
            icon="🔴",
            title=f"Spotify {kind.title()} Batch Failed",
            fields={"Items": str(item_count), "Reason": error},
            hint="Items are dropped from this page and looked up again on the next request",
        ).format()

    @staticmethod
    def enrichment_failed(item_id: str, reason: str) -> str:
        """One catalog record was missing fields; the item is dropped, not cached."""
        return LogTemplate(
            icon="⚠️",
            title="Missing Catalog Details",
            fields={"Item": item_id, "Reason": reason},
            hint="Not cached as unresolved - the lookup is repeated on the next request",
        ).format()

    @staticmethod
    def reference_malformed(item_id: str, text: str) -> str:
        """A post's Spotify link could not be parsed."""
        return LogTemplate(
            icon="⚠️",
            title="Malformed Spotify Link",
            fields={"Item": item_id, "Text": text[:120]},
        ).format()

    @staticmethod
    def reference_unsupported(item_id: str, catalog_type: str) -> str:
        """A post links to a catalog entity we do not resolve (playlist, artist, ...)."""
        return LogTemplate(
            icon="ℹ️",
            title="Unsupported Spotify Link Type",
            fields={"Item": item_id, "Type": catalog_type},
        ).format()
