"""
Tool-related data models.
"""

import json
from enum import Enum
from pathlib import Path
from typing import Optional, Dict, List, Tuple
from pydantic import BaseModel, Field, ValidationError, validator

from ..errors import CatalogError, ConfigurationError


# Canonical architectures the environment prober can report
SUPPORTED_ARCHES = ("x86_64", "aarch64")


class InstallMethod(str, Enum):
    """How a tool gets onto the machine."""
    APT = "apt"
    SNAP = "snap"
    CARGO = "cargo"
    PIPX = "pipx"
    GO = "go"
    GITHUB_RELEASE = "github_release"
    SCRIPT = "script"
    FONT = "font"


class ToolDescriptor(BaseModel):
    """Static description of how to install and verify one external tool."""
    name: str = Field(..., description="Unique tool identifier")
    description: Optional[str] = Field(None, description="Tool description")
    method: InstallMethod = Field(..., description="Default install method")
    package: Optional[str] = Field(None, description="Package, crate, module or URL for the method")
    alternatives: Dict[InstallMethod, str] = Field(
        default_factory=dict,
        description="Other methods able to provide the tool, mapped to their package name"
    )
    binary: Optional[str] = Field(None, description="Executable name, if the tool ships one")
    links: Dict[str, str] = Field(
        default_factory=dict,
        description="Symlink name -> installed binary (e.g. bat -> batcat)"
    )

    # github_release
    repo: Optional[str] = Field(None, description="GitHub owner/name")
    asset_template: Optional[str] = Field(None, description="Release asset file name template")
    archive_binary: Optional[str] = Field(None, description="Binary path inside the archive")
    archive_extras: Dict[str, str] = Field(
        default_factory=dict,
        description="Archive path -> destination under the home directory"
    )
    arch_map: Dict[str, str] = Field(
        default_factory=dict,
        description="Canonical architecture -> vendor asset naming"
    )

    # script / font
    script_url: Optional[str] = Field(None, description="Vendor install script URL")
    script_args: List[str] = Field(default_factory=list, description="Arguments for the vendor script")
    download_url: Optional[str] = Field(None, description="Font archive URL")

    verify_cmd: Optional[List[str]] = Field(None, description="Command verifying the install")
    verify_pattern: Optional[str] = Field(None, description="Regex expected in verification output")

    class Config:
        json_schema_extra = {
            "example": {
                "name": "lazydocker",
                "method": "github_release",
                "binary": "lazydocker",
                "repo": "jesseduffield/lazydocker",
                "asset_template": "lazydocker_{version}_Linux_{arch}.tar.gz",
                "archive_binary": "lazydocker",
                "arch_map": {"x86_64": "x86_64", "aarch64": "arm64"}
            }
        }

    @validator('arch_map')
    def validate_arch_coverage(cls, v):
        """A non-empty map must cover every architecture the prober reports."""
        if v:
            missing = [arch for arch in SUPPORTED_ARCHES if arch not in v]
            if missing:
                raise ValueError(f"arch_map does not cover: {', '.join(missing)}")
        return v

    @validator('asset_template', always=True)
    def validate_release_fields(cls, v, values):
        if values.get('method') == InstallMethod.GITHUB_RELEASE:
            if not values.get('repo') or not v:
                raise ValueError("github_release tools need 'repo' and 'asset_template'")
        return v

    @validator('verify_cmd', always=True)
    def default_verify_cmd(cls, v, values):
        if v is None and values.get('binary'):
            return [values['binary'], "--version"]
        return v

    def resolve(self, method_override: Optional[InstallMethod] = None) -> Tuple[InstallMethod, str]:
        """Return the effective (method, package) pair."""
        if method_override is None or method_override == self.method:
            return self.method, self.package or self.name
        if method_override in self.alternatives:
            return method_override, self.alternatives[method_override]
        raise ConfigurationError(
            f"{self.name} cannot be installed with {method_override.value}; "
            f"choose one of: {', '.join(m.value for m in self.available_methods())}"
        )

    def available_methods(self) -> List[InstallMethod]:
        return [self.method] + [m for m in self.alternatives if m != self.method]

    def supports_arch(self, arch: str) -> bool:
        return arch in SUPPORTED_ARCHES or arch in self.arch_map

    def normalize_arch(self, arch: str) -> str:
        """Map a canonical architecture to this vendor's asset naming."""
        return self.arch_map.get(arch, arch)

    def render_asset(self, template: str, tag: str, arch: str) -> str:
        return template.format(
            tag=tag,
            version=tag[1:] if tag.startswith("v") else tag,
            arch=self.normalize_arch(arch),
        )


class ToolCatalog(BaseModel):
    """Ordered, read-only set of tool descriptors."""
    tools: List[ToolDescriptor] = Field(default_factory=list)

    @validator('tools')
    def validate_unique_names(cls, v):
        seen = set()
        for tool in v:
            if tool.name in seen:
                raise ValueError(f"Duplicate tool name: {tool.name}")
            seen.add(tool.name)
        return v

    @classmethod
    def load(cls, path: Path) -> "ToolCatalog":
        """Load and validate a catalog file."""
        try:
            data = json.loads(Path(path).read_text())
        except (OSError, json.JSONDecodeError) as e:
            raise CatalogError(f"Cannot read tool catalog {path}: {e}") from e
        try:
            return cls(**data)
        except ValidationError as e:
            raise CatalogError(f"Invalid tool catalog {path}: {e}") from e

    def names(self) -> List[str]:
        return [t.name for t in self.tools]

    def get(self, name: str) -> ToolDescriptor:
        for tool in self.tools:
            if tool.name == name:
                return tool
        raise KeyError(name)

    def select(self, only: Optional[List[str]] = None) -> List[ToolDescriptor]:
        """Return descriptors in catalog order, restricted to `only` when given."""
        if not only:
            return list(self.tools)
        unknown = [n for n in only if n not in self.names()]
        if unknown:
            raise ConfigurationError(f"Unknown tools: {', '.join(unknown)}")
        return [t for t in self.tools if t.name in only]
