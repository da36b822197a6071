"""Federation message entities exchanged between pods."""

from datetime import datetime, timezone

from social.graze.federation.model.properties import Entity, entity, prop


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


class Location(Entity):
    properties = (
        prop("address"),
        prop("lat"),
        prop("lng"),
    )

    required = ("lat", "lng")


class Photo(Entity):
    properties = (
        prop("guid"),
        prop("author"),
        prop("public", bool, default=False),
        prop("created_at", datetime, default=utc_now),
        prop("remote_photo_path"),
        prop("remote_photo_name"),
        prop("status_message_guid"),
        prop("text"),
        prop("height", int),
        prop("width", int),
    )

    required = ("guid", "author", "remote_photo_path", "remote_photo_name")


class StatusMessage(Entity):
    """A post, optionally carrying photos and a location."""

    properties = (
        prop("guid"),
        prop("author"),
        prop("text"),
        prop("public", bool, default=False),
        prop("created_at", datetime, default=utc_now),
        entity("photos", ["Photo"], default=list),
        entity("location", "Location"),
    )

    required = ("guid", "author")
