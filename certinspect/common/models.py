"""Pydantic models: decoded extension values, alternative names, raw extension entries."""

from typing import Annotated, ClassVar, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class BasicConstraintsInfo(BaseModel):
    """Basic Constraints as reported by the certificate view."""
    is_ca: bool
    path_length: Optional[Union[int, Literal["unlimited"]]] = None  # None when not a CA


class DecodeFailure(BaseModel):
    """A structured extension that is present but could not be decoded."""
    message: str


class _AltName(BaseModel):
    """Common shape of a general name entry: numeric tag plus display value."""
    TAG: ClassVar[int] = -1
    value: str

    @property
    def tag(self) -> int:
        return self.TAG


class OtherNameEntry(_AltName):
    TAG: ClassVar[int] = 0
    kind: Literal["other_name"] = "other_name"


class EmailEntry(_AltName):
    TAG: ClassVar[int] = 1
    kind: Literal["email"] = "email"


class DnsEntry(_AltName):
    TAG: ClassVar[int] = 2
    kind: Literal["dns"] = "dns"


class X400AddressEntry(_AltName):
    TAG: ClassVar[int] = 3
    kind: Literal["x400_address"] = "x400_address"


class DirectoryNameEntry(_AltName):
    TAG: ClassVar[int] = 4
    kind: Literal["directory_name"] = "directory_name"


class EdiPartyEntry(_AltName):
    TAG: ClassVar[int] = 5
    kind: Literal["edi_party"] = "edi_party"


class UriEntry(_AltName):
    TAG: ClassVar[int] = 6
    kind: Literal["uri"] = "uri"


class IpAddressEntry(_AltName):
    TAG: ClassVar[int] = 7
    kind: Literal["ip_address"] = "ip_address"


class RegisteredIdEntry(_AltName):
    TAG: ClassVar[int] = 8
    kind: Literal["registered_id"] = "registered_id"


class UnknownAltName(BaseModel):
    """A general name whose numeric tag is outside 0-8."""
    kind: Literal["unknown"] = "unknown"
    tag: int
    raw: str

    @property
    def value(self) -> str:
        return self.raw


AltName = Annotated[
    Union[
        OtherNameEntry,
        EmailEntry,
        DnsEntry,
        X400AddressEntry,
        DirectoryNameEntry,
        EdiPartyEntry,
        UriEntry,
        IpAddressEntry,
        RegisteredIdEntry,
        UnknownAltName,
    ],
    Field(discriminator="kind"),
]

# Tag -> variant, in general name CHOICE order
ALT_NAME_TYPES = {
    cls.TAG: cls
    for cls in (
        OtherNameEntry,
        EmailEntry,
        DnsEntry,
        X400AddressEntry,
        DirectoryNameEntry,
        EdiPartyEntry,
        UriEntry,
        IpAddressEntry,
        RegisteredIdEntry,
    )
}


class DecodedExtensions(BaseModel):
    """Structured extensions of one certificate.

    Each optional field is None when the extension is absent, a decoded value
    when present, or a DecodeFailure when present but malformed.
    """
    basic_constraints: BasicConstraintsInfo
    key_usage: Optional[List[bool]] = None
    extended_key_usage: Optional[Union[List[str], DecodeFailure]] = None
    subject_alt_names: Optional[Union[List[AltName], DecodeFailure]] = None
    issuer_alt_names: Optional[Union[List[AltName], DecodeFailure]] = None


class ExtensionEntry(BaseModel):
    """Generic critical/non-critical extension dump entry."""
    oid: str
    name: str
    critical: bool
    raw: Optional[bytes] = None
