"""Read-only certificate view used by the extension decoder and reporter."""

from datetime import datetime
from typing import Dict, List, NamedTuple, Optional, Set, Tuple

from asn1crypto import core
from asn1crypto import x509 as asn1_x509
from cryptography import x509

from certinspect.common.errors import ExtensionDecodeError
from certinspect.extensions import oids


NOT_A_CA = -1
MAX_PATH_LENGTH = 2**31 - 1  # reported for a CA without a pathLen constraint
CERTIFICATE_V3 = 3

BASIC_CONSTRAINTS_OID = "2.5.29.19"
KEY_USAGE_OID = "2.5.29.15"
EXTENDED_KEY_USAGE_OID = "2.5.29.37"
SUBJECT_ALT_NAME_OID = "2.5.29.17"
ISSUER_ALT_NAME_OID = "2.5.29.18"

# asn1crypto KeyUsage bit names, in bit order
KEY_USAGE_BITS = (
    "digital_signature",
    "non_repudiation",
    "key_encipherment",
    "data_encipherment",
    "key_agreement",
    "key_cert_sign",
    "crl_sign",
    "encipher_only",
    "decipher_only",
)

# asn1crypto GeneralName choice -> CHOICE tag
GENERAL_NAME_TAGS = {
    "other_name": oids.SAN_OTHER_NAME,
    "rfc822_name": oids.SAN_RFC822_NAME,
    "dns_name": oids.SAN_DNS_NAME,
    "x400_address": oids.SAN_X400_ADDRESS,
    "directory_name": oids.SAN_DIRECTORY_NAME,
    "edi_party_name": oids.SAN_EDI_PARTY_NAME,
    "uniform_resource_identifier": oids.SAN_URI,
    "ip_address": oids.SAN_IP_ADDRESS,
    "registered_id": oids.SAN_REGISTERED_ID,
}

# Failures asn1crypto raises on malformed DER
_PARSE_ERRORS = (ValueError, TypeError)


class RawExtension(NamedTuple):
    critical: bool
    value: bytes     # DER OCTET STRING wrapping extnValue
    contents: bytes  # extnValue itself


def read_extensions(tbs_der: bytes) -> Dict[str, RawExtension]:
    """
    Split a TBSCertificate into its extensions without decoding any of them.

    Args:
        tbs_der: DER encoded TBSCertificate

    Returns:
        Dotted OID -> raw extension, in certificate order (first occurrence wins)

    Raises:
        ExtensionDecodeError: If the extensions list itself cannot be parsed
    """
    extensions: Dict[str, RawExtension] = {}
    try:
        tbs = asn1_x509.TbsCertificate.load(tbs_der)
        block = tbs["extensions"]
        if isinstance(block, core.Void):
            return extensions
        for ext in block:
            octets = ext["extn_value"]
            extensions.setdefault(ext["extn_id"].dotted, RawExtension(
                critical=bool(ext["critical"].native),
                value=octets.dump(),
                contents=octets.contents,
            ))
    except _PARSE_ERRORS as e:
        raise ExtensionDecodeError(f"Malformed extensions: {e}") from e
    return extensions


def _directory_name(name: asn1_x509.Name) -> str:
    # Rebuild as a cryptography Name to get its RFC 4514 rendering
    rdns = []
    for rdn in name.chosen:
        rdns.append(x509.RelativeDistinguishedName([
            x509.NameAttribute(x509.ObjectIdentifier(atv["type"].dotted), str(atv["value"].native))
            for atv in rdn
        ]))
    return x509.Name(rdns).rfc4514_string()


def general_name_to_pair(name: asn1_x509.GeneralName) -> Tuple[int, object]:
    """
    Convert a parsed GeneralName to a (tag, printable value) pair.

    Names without a string form (otherName, x400Address, ediPartyName) are
    returned as the DER encoding of the whole GeneralName.

    Args:
        name: General name from a SAN/IAN extension

    Returns:
        Tuple of (GeneralName CHOICE tag, display value)
    """
    tag = GENERAL_NAME_TAGS.get(name.name)
    if tag is None:
        raise ExtensionDecodeError(f"Unsupported general name: {name.name}")
    if tag == oids.SAN_DIRECTORY_NAME:
        return tag, _directory_name(name.chosen)
    if tag == oids.SAN_REGISTERED_ID:
        return tag, name.chosen.dotted
    if tag == oids.SAN_IP_ADDRESS:
        return tag, name.chosen.native
    if tag in (oids.SAN_RFC822_NAME, oids.SAN_DNS_NAME, oids.SAN_URI):
        # IA5String, reported as stored
        return tag, name.chosen.contents.decode("ascii")
    return tag, name.dump()


class X509CertificateView:
    """Expose a cryptography certificate the way the extension reporter reads it.

    Extensions are read one at a time, so a malformed extension only affects
    its own accessor. Structured accessors return None when the extension is
    absent. EKU and alternative name accessors raise ExtensionDecodeError when
    the extension cannot be decoded; Basic Constraints and Key Usage fall back
    to "absent".
    """

    def __init__(self, cert: x509.Certificate):
        self.cert = cert
        self._extensions: Dict[str, RawExtension] = {}
        self._extensions_error: Optional[str] = None
        try:
            self._extensions = read_extensions(cert.tbs_certificate_bytes)
        except ExtensionDecodeError as e:
            self._extensions_error = str(e)

    # -----------------------------
    # Header fields
    # -----------------------------
    @property
    def subject(self) -> str:
        return self.cert.subject.rfc4514_string()

    @property
    def issuer(self) -> str:
        return self.cert.issuer.rfc4514_string()

    @property
    def serial_number(self) -> int:
        return self.cert.serial_number

    @property
    def not_before(self) -> datetime:
        return self.cert.not_valid_before_utc

    @property
    def not_after(self) -> datetime:
        return self.cert.not_valid_after_utc

    @property
    def version(self) -> int:
        # Version.v1 == 0, Version.v3 == 2
        return self.cert.version.value + 1

    @property
    def signature_algorithm(self) -> str:
        return self.cert.signature_algorithm_oid._name

    # -----------------------------
    # Raw extension access
    # -----------------------------
    def _oids(self, critical: bool) -> Set[str]:
        return {oid for oid, ext in self._extensions.items() if ext.critical == critical}

    @property
    def critical_extension_oids(self) -> Set[str]:
        return self._oids(True)

    @property
    def non_critical_extension_oids(self) -> Set[str]:
        return self._oids(False)

    def extension_value(self, oid: str) -> Optional[bytes]:
        """
        Get the DER OCTET STRING wrapping an extension's extnValue.

        Args:
            oid: Dotted OID string

        Returns:
            Encoded bytes as found in the certificate, or None if absent
        """
        ext = self._extensions.get(oid)
        return ext.value if ext is not None else None

    def _decode(self, oid: str, spec, convert):
        """
        Decode one extension's extnValue.

        Args:
            oid: Dotted OID of the extension
            spec: asn1crypto type of the extnValue
            convert: Callable turning the parsed value into the accessor's result

        Returns:
            Converted value, or None if the extension is absent

        Raises:
            ExtensionDecodeError: If the extension cannot be decoded
        """
        if self._extensions_error is not None:
            raise ExtensionDecodeError(self._extensions_error)
        ext = self._extensions.get(oid)
        if ext is None:
            return None
        try:
            return convert(spec.load(ext.contents, strict=True))
        except _PARSE_ERRORS as e:
            raise ExtensionDecodeError(str(e)) from e

    # -----------------------------
    # Structured extensions
    # -----------------------------
    def basic_constraints(self) -> int:
        """Path length for a CA, MAX_PATH_LENGTH if unconstrained, NOT_A_CA otherwise."""
        try:
            value = self._decode(BASIC_CONSTRAINTS_OID, asn1_x509.BasicConstraints, _path_length)
        except ExtensionDecodeError:
            return NOT_A_CA
        return NOT_A_CA if value is None else value

    def key_usage(self) -> Optional[List[bool]]:
        """The nine Key Usage bits in RFC 5280 order, or None if absent."""
        try:
            return self._decode(KEY_USAGE_OID, asn1_x509.KeyUsage, _key_usage_bits)
        except ExtensionDecodeError:
            return None

    def extended_key_usage(self) -> Optional[List[str]]:
        """EKU OIDs in certificate order, or None if absent."""
        return self._decode(
            EXTENDED_KEY_USAGE_OID,
            asn1_x509.ExtKeyUsageSyntax,
            lambda usages: [usage.dotted for usage in usages],
        )

    def _alt_names(self, oid: str) -> Optional[List[Tuple[int, object]]]:
        return self._decode(
            oid,
            asn1_x509.GeneralNames,
            lambda names: [general_name_to_pair(name) for name in names],
        )

    def subject_alternative_names(self) -> Optional[List[Tuple[int, object]]]:
        return self._alt_names(SUBJECT_ALT_NAME_OID)

    def issuer_alternative_names(self) -> Optional[List[Tuple[int, object]]]:
        return self._alt_names(ISSUER_ALT_NAME_OID)


def _path_length(constraints: asn1_x509.BasicConstraints) -> int:
    if not constraints["ca"].native:
        return NOT_A_CA
    path_length = constraints["path_len_constraint"].native
    return MAX_PATH_LENGTH if path_length is None else path_length


def _key_usage_bits(usage: asn1_x509.KeyUsage) -> List[bool]:
    flags = usage.native
    return [bit in flags for bit in KEY_USAGE_BITS]
