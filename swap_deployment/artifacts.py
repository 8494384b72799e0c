import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, Union

from swap_deployment.constants import DEFAULT_BUILD_DIR
from swap_deployment.utils import _load_json

UNLINKED_LIBRARY_PATTERN = re.compile(r"__\$\w{34}\$__")


class ContractArtifact(NamedTuple):
    """Compiled bytecode and ABI for a single contract type."""

    name: str
    abi: List[Dict[str, Any]]
    bytecode: str

    @property
    def constructor_inputs(self) -> List[Dict[str, Any]]:
        for entry in self.abi:
            if entry.get("type") == "constructor":
                return list(entry.get("inputs", []))
        return []


class ArtifactProvider(ABC):
    """Read-only lookup of compiled contract artifacts by name."""

    @abstractmethod
    def get(self, name: str) -> ContractArtifact:
        raise NotImplementedError


def _get_bytecode(data: Dict[str, Any]) -> Optional[str]:
    bytecode = data.get("bytecode")
    if isinstance(bytecode, dict):
        # foundry
        bytecode = bytecode.get("object")
    if not bytecode:
        return None
    if not bytecode.startswith("0x"):
        bytecode = f"0x{bytecode}"
    return bytecode


class BuildArtifactProvider(ArtifactProvider):
    """
    Loads compiled contracts from a directory of JSON build artifacts,
    as written by Truffle (build/contracts), Hardhat (artifacts) or Foundry (out).
    """

    def __init__(self, directory: Union[Path, str] = DEFAULT_BUILD_DIR):
        self.directory = Path(directory)
        self._cache: Dict[str, ContractArtifact] = dict()

    def _find(self, name: str) -> Path:
        if not self.directory.is_dir():
            raise FileNotFoundError(f"Build directory not found at {self.directory}")

        # hardhat writes debug files (*.dbg.json) next to each artifact
        candidates = [
            path
            for path in self.directory.rglob(f"{name}.json")
            if not path.name.endswith(".dbg.json")
        ]
        if not candidates:
            raise ValueError(f"No contract artifact found with name '{name}' in {self.directory}.")
        if len(candidates) != 1:
            raise ValueError(
                f"Artifact {name} is ambiguous - "
                f"expected exactly one build file, got {len(candidates)}: "
                f"{', '.join(str(c) for c in sorted(candidates))}"
            )
        return candidates[0]

    def get(self, name: str) -> ContractArtifact:
        if name in self._cache:
            return self._cache[name]

        filepath = self._find(name)
        data = _load_json(filepath)
        if "abi" not in data:
            raise ValueError(f"Build file {filepath} has no ABI.")

        bytecode = _get_bytecode(data)
        if not bytecode or bytecode == "0x":
            raise ValueError(f"{name} has no deployment bytecode (abstract contract or interface?)")

        placeholders = set(UNLINKED_LIBRARY_PATTERN.findall(bytecode))
        if placeholders:
            raise ValueError(
                f"{name} has unlinked libraries: {', '.join(sorted(placeholders))}. "
                "Link before deploying."
            )

        artifact = ContractArtifact(name=name, abi=list(data["abi"]), bytecode=bytecode)
        self._cache[name] = artifact
        return artifact
