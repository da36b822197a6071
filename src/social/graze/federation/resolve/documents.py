"""Discovery document adapters.

Maps host-meta and WebFinger XRD documents and hCard profile pages onto the
fields discovery needs. Parsing itself is delegated to ElementTree and
BeautifulSoup.
"""

import base64
import binascii
from typing import Dict, Iterator, List, Optional
import xml.etree.ElementTree as ET

from bs4 import BeautifulSoup, Tag
from pydantic import BaseModel

LRDD_REL = "lrdd"
HCARD_REL = "http://microformats.org/profile/hcard"
SEED_LOCATION_REL = "http://joindiaspora.com/seed_location"
GUID_REL = "http://joindiaspora.com/guid"
PUBLIC_KEY_REL = "diaspora-public-key"


class DocumentError(ValueError):
    """A discovery document could not be parsed."""


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _parse_xrd(body: str) -> ET.Element:
    try:
        root = ET.fromstring(body)
    except ET.ParseError as e:
        raise DocumentError(f"Invalid XRD document: {e}") from e
    if _local_name(root.tag) != "XRD":
        raise DocumentError(f"Unexpected root element: {_local_name(root.tag)}")
    return root


def _children(root: ET.Element, name: str) -> Iterator[ET.Element]:
    return (child for child in root if _local_name(child.tag) == name)


def _child_text(root: ET.Element, name: str) -> Optional[str]:
    child = next(_children(root, name), None)
    if child is None or child.text is None:
        return None
    return child.text.strip() or None


def _links(root: ET.Element) -> List[Dict[str, str]]:
    return [dict(link.attrib) for link in _children(root, "Link")]


def _link_attribute(links: List[Dict[str, str]], rel: str, attribute: str) -> Optional[str]:
    link = next((link for link in links if link.get("rel") == rel), None)
    if link is None:
        return None
    return link.get(attribute) or None


class HostMeta(BaseModel):
    """Pod-level host-meta document."""

    webfinger_template_url: str

    @classmethod
    def from_xml(cls, body: str) -> "HostMeta":
        root = _parse_xrd(body)
        template = _link_attribute(_links(root), LRDD_REL, "template")
        if template is None or "{uri}" not in template:
            raise DocumentError("host-meta has no lrdd template")
        return cls(webfinger_template_url=template)


class WebFinger(BaseModel):
    """Account-level WebFinger XRD document."""

    acct_uri: str
    alias_url: Optional[str] = None
    hcard_url: str
    seed_url: str
    guid: Optional[str] = None
    public_key: Optional[str] = None

    @classmethod
    def from_xml(cls, body: str) -> "WebFinger":
        root = _parse_xrd(body)
        links = _links(root)

        acct_uri = _child_text(root, "Subject")
        hcard_url = _link_attribute(links, HCARD_REL, "href")
        seed_url = _link_attribute(links, SEED_LOCATION_REL, "href")
        if acct_uri is None or hcard_url is None or seed_url is None:
            raise DocumentError("WebFinger is missing subject, hcard or seed location")

        return cls(
            acct_uri=acct_uri,
            alias_url=_child_text(root, "Alias"),
            hcard_url=hcard_url,
            seed_url=seed_url,
            guid=_link_attribute(links, GUID_REL, "href"),
            public_key=_decode_public_key(_link_attribute(links, PUBLIC_KEY_REL, "href")),
        )


def _decode_public_key(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    try:
        return base64.b64decode(value, validate=True).decode("ascii").strip()
    except (binascii.Error, UnicodeDecodeError) as e:
        raise DocumentError(f"Invalid public key: {e}") from e


class HCard(BaseModel):
    """Profile fields published on an account's hCard page."""

    guid: Optional[str] = None
    nickname: Optional[str] = None
    full_name: Optional[str] = None
    url: Optional[str] = None
    public_key: Optional[str] = None
    photo_large_url: Optional[str] = None
    photo_medium_url: Optional[str] = None
    photo_small_url: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    searchable: bool = False

    @classmethod
    def from_html(cls, body: str) -> "HCard":
        soup = BeautifulSoup(body, "html.parser")
        vcard = soup.find(class_="vcard")
        if not isinstance(vcard, Tag):
            raise DocumentError("hCard has no vcard element")

        url_elem = vcard.find(id="pod_location")
        return cls(
            guid=_text(vcard, "uid"),
            nickname=_text(vcard, "nickname"),
            full_name=_text(vcard, "fn"),
            url=url_elem.get("href") if isinstance(url_elem, Tag) else None,
            public_key=_text(vcard, "key"),
            photo_large_url=_photo(vcard, "entity_photo"),
            photo_medium_url=_photo(vcard, "entity_photo_medium"),
            photo_small_url=_photo(vcard, "entity_photo_small"),
            first_name=_text(vcard, "given_name"),
            last_name=_text(vcard, "family_name"),
            searchable=_text(vcard, "searchable") == "true",
        )


def _text(vcard: Tag, class_name: str) -> Optional[str]:
    elem = vcard.find(class_=class_name)
    if not isinstance(elem, Tag):
        return None
    return elem.get_text().strip() or None


def _photo(vcard: Tag, class_name: str) -> Optional[str]:
    container = vcard.find("dl", class_=class_name)
    if not isinstance(container, Tag):
        return None
    img = container.find("img")
    if not isinstance(img, Tag):
        return None
    src = img.get("src")
    return src if isinstance(src, str) and src else None
