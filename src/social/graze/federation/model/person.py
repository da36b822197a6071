"""Identity records produced by handle discovery."""

from social.graze.federation.model.properties import Entity, entity, prop


class Profile(Entity):
    """Public profile of a federated account, sourced from its hCard."""

    properties = (
        prop("diaspora_handle"),
        prop("first_name"),
        prop("last_name"),
        prop("image_url"),
        prop("image_url_medium"),
        prop("image_url_small"),
        prop("searchable", bool, default=True),
        prop("tag_string"),
        prop("bio"),
        prop("location"),
        prop("gender"),
        prop("birthday"),
        prop("nsfw", bool, default=False),
    )

    required = ("diaspora_handle",)


class Person(Entity):
    """Verified identity of a federated account.

    Built once at the end of a successful discovery and never modified.
    """

    properties = (
        prop("guid"),
        prop("diaspora_handle"),
        prop("url"),
        prop("public_key"),
        entity("profile", Profile),
    )

    required = ("guid", "diaspora_handle", "url", "public_key")
