"""
Identity of an open-source component as the Hub's component search understands it.

The Hub indexes components by forge (package ecosystem) plus an origin id whose
format depends on the forge: Maven coordinates are colon-separated, every other
forge uses ``name/version``.
"""

from dataclasses import dataclass
from typing import Optional

from packageurl import PackageURL

from ...exceptions import ValidationError

# purl types whose Hub forge name differs from the purl type
_PURL_TYPE_TO_FORGE = {
    "npm": "npmjs",
    "gem": "rubygems",
    "cargo": "crates",
    "golang": "golang",
    "pypi": "pypi",
    "nuget": "nuget",
    "maven": "maven",
    "composer": "packagist",
    "cocoapods": "cocoapods",
}

_COLON_SEPARATED_FORGES = {"maven"}


@dataclass(frozen=True)
class ExternalId:
    forge: str
    name: str
    version: Optional[str] = None
    group: Optional[str] = None

    def create_hub_origin_id(self) -> str:
        if self.forge in _COLON_SEPARATED_FORGES:
            parts = [p for p in (self.group, self.name, self.version) if p]
            return ":".join(parts)
        if self.version:
            return f"{self.name}/{self.version}"
        return self.name

    def create_external_id(self) -> str:
        return f"{self.forge}:{self.create_hub_origin_id()}"

    @classmethod
    def from_purl(cls, purl: str) -> "ExternalId":
        """
        Build an ExternalId from a package URL such as ``pkg:maven/org.slf4j/slf4j-api@1.7.30``.

        Raises:
            ValidationError: If the purl cannot be parsed.
        """
        try:
            package = PackageURL.from_string(purl)
        except ValueError as e:
            raise ValidationError(f"Invalid package URL '{purl}': {e}", details={"purl": purl})

        forge = _PURL_TYPE_TO_FORGE.get(package.type, package.type)
        if forge in _COLON_SEPARATED_FORGES:
            return cls(forge=forge, name=package.name, version=package.version, group=package.namespace)
        name = f"{package.namespace}/{package.name}" if package.namespace else package.name
        return cls(forge=forge, name=name, version=package.version)
