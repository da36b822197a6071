"""
Unit tests for discovery document adapters in social.graze.federation.resolve.documents

Tests cover host-meta and WebFinger XRD parsing, hCard HTML parsing and
the errors raised for unusable documents.
"""

import pytest

from social.graze.federation.resolve.documents import (
    DocumentError,
    HCard,
    HostMeta,
    WebFinger,
)
from tests.test_helpers import (
    HCARD_PUBLIC_KEY,
    PUBLIC_KEY,
    hcard_html,
    host_meta_xml,
    webfinger_xml,
)


class TestHostMeta:
    """Test suite for HostMeta.from_xml."""

    def test_from_xml(self):
        """Test the lrdd template is extracted."""
        host_meta = HostMeta.from_xml(host_meta_xml("https://example.com/wf/{uri}"))
        assert host_meta.webfinger_template_url == "https://example.com/wf/{uri}"

    def test_from_xml_without_namespace(self):
        """Test documents without the XRD namespace are accepted."""
        body = '<XRD><Link rel="lrdd" template="https://example.com/wf/{uri}"/></XRD>'
        assert HostMeta.from_xml(body).webfinger_template_url == (
            "https://example.com/wf/{uri}"
        )

    def test_from_xml_ignores_other_links(self):
        body = (
            '<XRD xmlns="http://docs.oasis-open.org/ns/xri/xrd-1.0">'
            '<Link rel="other" template="https://example.com/other/{uri}"/>'
            '<Link rel="lrdd" template="https://example.com/wf/{uri}"/>'
            "</XRD>"
        )
        assert HostMeta.from_xml(body).webfinger_template_url == (
            "https://example.com/wf/{uri}"
        )

    def test_from_xml_missing_lrdd(self):
        body = '<XRD><Link rel="other" template="https://example.com/{uri}"/></XRD>'
        with pytest.raises(DocumentError):
            HostMeta.from_xml(body)

    def test_from_xml_template_without_placeholder(self):
        body = '<XRD><Link rel="lrdd" template="https://example.com/wf"/></XRD>'
        with pytest.raises(DocumentError):
            HostMeta.from_xml(body)

    def test_from_xml_invalid(self):
        with pytest.raises(DocumentError):
            HostMeta.from_xml("<html><body>Not found</body>")

    def test_from_xml_wrong_root(self):
        with pytest.raises(DocumentError):
            HostMeta.from_xml("<html></html>")


class TestWebFinger:
    """Test suite for WebFinger.from_xml."""

    def test_from_xml(self):
        """Test all fields are extracted and the public key decoded."""
        webfinger = WebFinger.from_xml(webfinger_xml())
        assert webfinger.acct_uri == "acct:alice@example.com"
        assert webfinger.alias_url == "https://example.com/people/0123"
        assert webfinger.hcard_url == "https://example.com/hcard/users/0123"
        assert webfinger.seed_url == "https://example.com/"
        assert webfinger.guid == "wf-guid-0123"
        assert webfinger.public_key == PUBLIC_KEY

    def test_from_xml_optional_fields(self):
        """Test guid and public key are optional."""
        webfinger = WebFinger.from_xml(webfinger_xml(guid=None, public_key=None))
        assert webfinger.guid is None
        assert webfinger.public_key is None

    def test_from_xml_missing_subject(self):
        body = webfinger_xml().replace("<Subject>acct:alice@example.com</Subject>", "")
        with pytest.raises(DocumentError):
            WebFinger.from_xml(body)

    def test_from_xml_missing_hcard(self):
        body = webfinger_xml().replace("http://microformats.org/profile/hcard", "x")
        with pytest.raises(DocumentError):
            WebFinger.from_xml(body)

    def test_from_xml_invalid_public_key(self):
        body = webfinger_xml(public_key=None).replace(
            "</XRD>", '<Link rel="diaspora-public-key" href="not base64!"/></XRD>'
        )
        with pytest.raises(DocumentError):
            WebFinger.from_xml(body)

    def test_from_xml_invalid(self):
        with pytest.raises(DocumentError):
            WebFinger.from_xml("not xml at all")


class TestHCard:
    """Test suite for HCard.from_html."""

    def test_from_html(self):
        """Test profile fields are extracted."""
        hcard = HCard.from_html(hcard_html())
        assert hcard.guid == "hcard-guid-0123"
        assert hcard.nickname == "alice"
        assert hcard.full_name == "Alice Smith"
        assert hcard.url == "https://example.com/"
        assert hcard.public_key == HCARD_PUBLIC_KEY
        assert hcard.first_name == "Alice"
        assert hcard.last_name == "Smith"
        assert hcard.photo_large_url == "https://example.com/uploads/large.jpg"
        assert hcard.photo_medium_url == "https://example.com/uploads/medium.jpg"
        assert hcard.photo_small_url == "https://example.com/uploads/small.jpg"
        assert hcard.searchable is True

    def test_from_html_not_searchable(self):
        assert HCard.from_html(hcard_html(searchable="false")).searchable is False

    def test_from_html_missing_fields(self):
        """Test missing guid and key come back as None."""
        hcard = HCard.from_html(hcard_html(guid=None, public_key=None))
        assert hcard.guid is None
        assert hcard.public_key is None

    def test_from_html_without_vcard(self):
        with pytest.raises(DocumentError):
            HCard.from_html("<html><body><p>Nothing here</p></body></html>")
