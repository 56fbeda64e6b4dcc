"""
Name registries for X.509 v3 extension OIDs, Extended Key Usage OIDs and
general name type tags.

The tables are built once at import time and exposed read-only; every lookup
has an explicit fallback, so none of them raise.
"""

from types import MappingProxyType

from cryptography.x509.oid import ExtendedKeyUsageOID, ExtensionOID


UNKNOWN_EXTENSION = "Unknown Extension"
UNKNOWN_EKU = "Unknown EKU"

# Microsoft / Netscape Server Gated Crypto are not in the library's EKU table
MICROSOFT_SGC = "1.3.6.1.4.1.311.10.3.3"
NETSCAPE_SGC = "2.16.840.1.113730.4.1"

EXTENSION_NAMES = MappingProxyType({
    ExtensionOID.BASIC_CONSTRAINTS.dotted_string: "Basic Constraints",
    ExtensionOID.KEY_USAGE.dotted_string: "Key Usage",
    ExtensionOID.EXTENDED_KEY_USAGE.dotted_string: "Extended Key Usage",
    ExtensionOID.SUBJECT_ALTERNATIVE_NAME.dotted_string: "Subject Alternative Name",
    ExtensionOID.ISSUER_ALTERNATIVE_NAME.dotted_string: "Issuer Alternative Name",
    ExtensionOID.SUBJECT_KEY_IDENTIFIER.dotted_string: "Subject Key Identifier",
    ExtensionOID.AUTHORITY_KEY_IDENTIFIER.dotted_string: "Authority Key Identifier",
    ExtensionOID.CRL_DISTRIBUTION_POINTS.dotted_string: "CRL Distribution Points",
    ExtensionOID.AUTHORITY_INFORMATION_ACCESS.dotted_string: "Authority Information Access",
    ExtensionOID.CERTIFICATE_POLICIES.dotted_string: "Certificate Policies",
    ExtensionOID.POLICY_CONSTRAINTS.dotted_string: "Policy Constraints",
    ExtensionOID.INHIBIT_ANY_POLICY.dotted_string: "Inhibit Any Policy",
    ExtensionOID.SUBJECT_DIRECTORY_ATTRIBUTES.dotted_string: "Subject Directory Attributes",
})

EXTENDED_KEY_USAGE_NAMES = MappingProxyType({
    ExtendedKeyUsageOID.SERVER_AUTH.dotted_string: "Server Authentication",
    ExtendedKeyUsageOID.CLIENT_AUTH.dotted_string: "Client Authentication",
    ExtendedKeyUsageOID.CODE_SIGNING.dotted_string: "Code Signing",
    ExtendedKeyUsageOID.EMAIL_PROTECTION.dotted_string: "Email Protection",
    ExtendedKeyUsageOID.TIME_STAMPING.dotted_string: "Time Stamping",
    ExtendedKeyUsageOID.OCSP_SIGNING.dotted_string: "OCSP Signing",
    MICROSOFT_SGC: "Microsoft Server Gated Crypto",
    NETSCAPE_SGC: "Netscape Server Gated Crypto",
})

# GeneralName CHOICE tags (RFC 5280, 4.2.1.6)
SAN_OTHER_NAME = 0
SAN_RFC822_NAME = 1
SAN_DNS_NAME = 2
SAN_X400_ADDRESS = 3
SAN_DIRECTORY_NAME = 4
SAN_EDI_PARTY_NAME = 5
SAN_URI = 6
SAN_IP_ADDRESS = 7
SAN_REGISTERED_ID = 8

SAN_TYPE_NAMES = MappingProxyType({
    SAN_OTHER_NAME: "Other Name",
    SAN_RFC822_NAME: "RFC 822 Name (Email)",
    SAN_DNS_NAME: "DNS Name",
    SAN_X400_ADDRESS: "X.400 Address",
    SAN_DIRECTORY_NAME: "Directory Name",
    SAN_EDI_PARTY_NAME: "EDI Party Name",
    SAN_URI: "URI",
    SAN_IP_ADDRESS: "IP Address",
    SAN_REGISTERED_ID: "Registered ID",
})

# Key Usage bit positions (RFC 5280, 4.2.1.3)
KEY_USAGE_NAMES = (
    "Digital Signature",
    "Non-Repudiation",
    "Key Encipherment",
    "Data Encipherment",
    "Key Agreement",
    "Key Cert Sign",
    "CRL Sign",
    "Encipher Only",
    "Decipher Only",
)


def extension_name(oid: str) -> str:
    """
    Get human-readable name for an extension OID.

    Args:
        oid: Dotted OID string

    Returns:
        Standard extension name, or "Unknown Extension"
    """
    return EXTENSION_NAMES.get(oid, UNKNOWN_EXTENSION)


def extended_key_usage_name(oid: str) -> str:
    """Get human-readable name for an Extended Key Usage OID."""
    return EXTENDED_KEY_USAGE_NAMES.get(oid, UNKNOWN_EKU)


def san_type_name(tag: int) -> str:
    """Get human-readable name for a general name type tag (0-8)."""
    name = SAN_TYPE_NAMES.get(tag)
    if name is None:
        return f"Unknown Type ({tag})"
    return name


def key_usage_name(index: int) -> str:
    """Get the Key Usage flag name at bit position `index`."""
    return KEY_USAGE_NAMES[index]
