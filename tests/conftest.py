import pytest
from typing import Callable, List, Union

from sitemapgen.core.config import Settings
from sitemapgen.xml_output.types import SITEMAP_NAMESPACE, XML_DECLARATION


def wrap_urls(xml: Union[str, List[str]]) -> str:
    """Wrap <url> elements in the same elements as a compact sitemap."""
    body = "".join(xml) if isinstance(xml, list) else xml
    return f'{XML_DECLARATION}<urlset xmlns="{SITEMAP_NAMESPACE}">{body}</urlset>'


@pytest.fixture
def wrap() -> Callable[[Union[str, List[str]]], str]:
    return wrap_urls


@pytest.fixture
def settings() -> Settings:
    """Settings independent of the environment."""
    return Settings(
        _env_file=None,
        log_level="DEBUG",
        log_format="console",
        output_format="compact",
        validate_output=True,
        schema_location=None,
        timezone="UTC",
    )


@pytest.fixture
def sitemap_xsd(tmp_path):
    """Minimal sitemap XSD written to a temporary file."""
    schema = f"""<?xml version="1.0" encoding="UTF-8"?>
<xsd:schema xmlns:xsd="http://www.w3.org/2001/XMLSchema"
            targetNamespace="{SITEMAP_NAMESPACE}"
            xmlns="{SITEMAP_NAMESPACE}"
            elementFormDefault="qualified">
  <xsd:element name="urlset">
    <xsd:complexType>
      <xsd:sequence>
        <xsd:element name="url" minOccurs="0" maxOccurs="unbounded">
          <xsd:complexType>
            <xsd:sequence>
              <xsd:element name="loc" type="xsd:anyURI"/>
              <xsd:element name="lastmod" type="xsd:string" minOccurs="0"/>
              <xsd:element name="changefreq" type="xsd:string" minOccurs="0"/>
              <xsd:element name="priority" type="xsd:decimal" minOccurs="0"/>
            </xsd:sequence>
          </xsd:complexType>
        </xsd:element>
      </xsd:sequence>
    </xsd:complexType>
  </xsd:element>
</xsd:schema>
"""
    path = tmp_path / "sitemap.xsd"
    path.write_text(schema, encoding="utf-8")
    return path
