"""Hand-built certificate views for shapes the X.509 library will not produce."""

from datetime import datetime, timezone

from certinspect.common.errors import ExtensionDecodeError


class FakeCertificate:
    """Duck-typed stand-in for X509CertificateView."""

    def __init__(
        self,
        version=3,
        basic_constraints=-1,
        key_usage=None,
        extended_key_usage=None,
        subject_alt_names=None,
        issuer_alt_names=None,
        critical=None,
        non_critical=None,
        raw=None,
    ):
        self.subject = "CN=fake.example,O=certinspect"
        self.issuer = "CN=Fake CA,O=certinspect"
        self.serial_number = 4242
        self.not_before = datetime(2024, 1, 1, tzinfo=timezone.utc)
        self.not_after = datetime(2025, 1, 1, tzinfo=timezone.utc)
        self.version = version
        self.signature_algorithm = "ecdsa-with-SHA256"
        self.critical_extension_oids = set(critical or ())
        self.non_critical_extension_oids = set(non_critical or ())
        self._raw = dict(raw or {})
        self._basic_constraints = basic_constraints
        self._key_usage = key_usage
        self._eku = extended_key_usage
        self._san = subject_alt_names
        self._ian = issuer_alt_names

    @staticmethod
    def _answer(value):
        if isinstance(value, Exception):
            raise value
        return value

    def extension_value(self, oid):
        return self._raw.get(oid)

    def basic_constraints(self):
        return self._basic_constraints

    def key_usage(self):
        return self._key_usage

    def extended_key_usage(self):
        return self._answer(self._eku)

    def subject_alternative_names(self):
        return self._answer(self._san)

    def issuer_alternative_names(self):
        return self._answer(self._ian)


def malformed(message="bad encoding"):
    return ExtensionDecodeError(message)
