"""
Pytest configuration for unit tests.

Provides small dictionary documents shared by the test modules and resets
the configuration singletons between tests.
"""

import pytest


JMDICT_XML = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE JMdict [
<!ELEMENT JMdict (entry*)>
<!-- it's a comment with "quotes" and <angle brackets> -->
<!ENTITY v1 "Ichidan verb">
<!ENTITY vt "transitive verb">
<!ENTITY v5k "Godan verb with `ku' ending">
<!ENTITY n "noun (common) (futsuumeishi)">
]>
<JMdict>
<!-- JMdict created: 2024-01-01 -->
<entry>
<ent_seq>1358280</ent_seq>
<k_ele>
<keb>食べる</keb>
<ke_pri>ichi1</ke_pri>
</k_ele>
<r_ele>
<reb>たべる</reb>
<re_pri>ichi1</re_pri>
</r_ele>
<sense>
<pos>&v1;</pos>
<pos>&vt;</pos>
<gloss>to eat</gloss>
<gloss xml:lang="ger" g_type="lit">essen</gloss>
</sense>
</entry>
<entry>
<ent_seq>1000000</ent_seq>
<r_ele>
<reb>ヽ</reb>
<re_nokanji/>
</r_ele>
<sense>
<pos>&n;</pos>
<lsource xml:lang="eng" ls_wasei="y">rock &amp; roll</lsource>
<gloss>repetition mark in katakana</gloss>
</sense>
</entry>
<entry>
<ent_seq>1000100</ent_seq>
<k_ele><keb>書く</keb></k_ele>
<r_ele><reb>かく</reb></r_ele>
<sense>
<pos>&v5k;</pos>
<gloss><![CDATA[to write &v1; <verbatim>]]></gloss>
</sense>
</entry>
</JMdict>
""".encode('utf-8')


JMNEDICT_XML = """<!DOCTYPE JMnedict [
<!ENTITY surname "family or surname">
<!ENTITY place "place name">
]>
<JMnedict>
<entry>
<ent_seq>5000000</ent_seq>
<k_ele><keb>ゝ泉</keb></k_ele>
<r_ele><reb>いずみ</reb></r_ele>
<trans>
<name_type>&surname;</name_type>
<trans_det>Izumi</trans_det>
</trans>
</entry>
<entry>
<ent_seq>5000001</ent_seq>
<r_ele><reb>あさか</reb></r_ele>
<trans>
<name_type>&place;</name_type>
<name_type>&surname;</name_type>
<trans_det>Asaka</trans_det>
</trans>
</entry>
</JMnedict>
""".encode('utf-8')


KANJIDIC_XML = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE kanjidic2 [
<!ELEMENT kanjidic2 (header,character*)>
<!ATTLIST cp_value cp_type CDATA #REQUIRED>
]>
<kanjidic2>
<header>
<file_version>4</file_version>
<database_version>2024-001</database_version>
<date_of_creation>2024-01-01</date_of_creation>
</header>
<character>
<literal>亜</literal>
<codepoint>
<cp_value cp_type="ucs">4e9c</cp_value>
<cp_value cp_type="jis208">1-16-01</cp_value>
</codepoint>
<radical>
<rad_value rad_type="classical">7</rad_value>
</radical>
<misc>
<grade>8</grade>
<stroke_count>7</stroke_count>
<variant var_type="jis208">1-48-19</variant>
<freq>1509</freq>
<jlpt>1</jlpt>
</misc>
<dic_number>
<dic_ref dr_type="moro" m_vol="1" m_page="0525">272</dic_ref>
<dic_ref dr_type="nelson_c">43</dic_ref>
</dic_number>
<query_code>
<q_code qc_type="skip">4-7-1</q_code>
</query_code>
<reading_meaning>
<rmgroup>
<reading r_type="ja_on">ア</reading>
<reading r_type="ja_kun">つ.ぐ</reading>
<meaning>Asia</meaning>
<meaning m_lang="fr">Asie</meaning>
</rmgroup>
<nanori>や</nanori>
</reading_meaning>
</character>
<character>
<literal>唖</literal>
<codepoint><cp_value cp_type="ucs">5516</cp_value></codepoint>
<radical><rad_value rad_type="classical">30</rad_value></radical>
<misc><stroke_count>10</stroke_count><stroke_count>11</stroke_count></misc>
</character>
</kanjidic2>
""".encode('utf-8')


@pytest.fixture(autouse=True, scope="function")
def reset_config_singletons(monkeypatch):
    """
    Reset the cached settings and catalog for every test.

    Tests that override JMDICT_* environment variables would otherwise see
    the settings cached by an earlier test.
    """
    from jmdict_reader import config

    monkeypatch.setattr(config, '_parser_settings', None)
    monkeypatch.setattr(config, '_catalog', None)
    for name in ('JMDICT_CHUNK_SIZE', 'JMDICT_ENCODING', 'JMDICT_HUGE_TREE',
                 'JMDICT_STRICT_DIRECTIVES'):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def jmdict_xml() -> bytes:
    return JMDICT_XML


@pytest.fixture
def jmnedict_xml() -> bytes:
    return JMNEDICT_XML


@pytest.fixture
def kanjidic_xml() -> bytes:
    return KANJIDIC_XML


@pytest.fixture
def write_source(tmp_path):
    """Write document bytes to a file (gzip-compressed for .gz names)."""
    import gzip

    def _write(name: str, data: bytes):
        path = tmp_path / name
        if name.endswith('.gz'):
            with gzip.open(path, 'wb') as f:
                f.write(data)
        else:
            path.write_bytes(data)
        return path

    return _write
