"""
Shared fixtures for menota-helper tests.
"""

from __future__ import annotations

import pytest

import menota_helper.config as config_module

SAMPLE_TEI = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE TEI [
  <!ENTITY aelig "&#230;">
]>
<!-- Menota transcription -->
<TEI xmlns="http://www.tei-c.org/ns/1.0">
  <text>
    <body>
      <pb n="1r"/>
      <p><lb n="1"/>Þat var &aelig;tt, &amp; mikit.<note>ed. note, &#x2c; kept</note>
<lb n="2"/>goþ kona <unclear>hin</unclear> <add>,</add></p>
      <pb n="1v"/>
      <p><lb n="3"/>Olafr <hi rend="initial">k</hi>onungr (sic)</p>
    </body>
  </text>
</TEI>
<!-- end -->
"""


@pytest.fixture
def sample_tei() -> str:
    return SAMPLE_TEI


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the global config manager at an empty temporary file."""
    monkeypatch.setenv("MENOTA_HELPER_CONFIG", str(tmp_path / "config" / "config.yaml"))
    for name in ("MENOTA_HELPER_LOG_LEVEL", "MENOTA_HELPER_INLINE_TAGS", "MENOTA_HELPER_PARAGRAPH_SCOPED_LB"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config_module, "_config_manager", None)
    yield
