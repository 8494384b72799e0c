import json
from collections import defaultdict
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Sequence

from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address

from swap_deployment.orchestrator import DeploymentResult
from swap_deployment.plan import DeploymentPlan
from swap_deployment.utils import _load_json

ChainId = int
ContractName = str
ABI = List[Dict[str, Any]]


STANDARD_REGISTRY_JSON_FORMAT = {"indent": 4, "separators": (",", ": ")}


class RegistryEntry(NamedTuple):
    """Represents a single entry in a contract registry."""

    chain_id: ChainId
    name: ContractName
    address: ChecksumAddress
    abi: ABI
    tx_hash: str
    block_number: int
    deployer: str
    constructor_args: Sequence[Any] = ()


def _to_json_value(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return [_to_json_value(v) for v in value]
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    return value


def _get_entry(result: DeploymentResult, abi: ABI) -> RegistryEntry:
    entry = RegistryEntry(
        name=result.name,
        address=to_checksum_address(result.address),
        abi=abi,
        chain_id=result.chain_id,
        tx_hash=result.tx_hash,
        block_number=result.block_number,
        deployer=result.deployer,
        constructor_args=_to_json_value(list(result.constructor_args)),
    )
    return entry


def _get_entries(results: Sequence[DeploymentResult], plan: DeploymentPlan) -> List[RegistryEntry]:
    """Returns a list of registry entries from deployment results."""
    abis: Dict[ContractName, ABI] = {spec.name: spec.artifact.abi for spec in plan}
    entries = list()
    for result in results:
        entry = _get_entry(result=result, abi=abis.get(result.name, []))
        entries.append(entry)
    return entries


def read_registry(filepath: Path) -> List[RegistryEntry]:
    data = _load_json(filepath)
    registry_entries = list()
    for chain_id, entries in data.items():
        for contract_name, artifacts in entries.items():
            registry_entry = RegistryEntry(
                chain_id=int(chain_id),
                name=contract_name,
                address=artifacts["address"],
                abi=artifacts["abi"],
                tx_hash=artifacts["tx_hash"],
                block_number=artifacts["block_number"],
                deployer=artifacts["deployer"],
                constructor_args=artifacts.get("constructor_args", []),
            )
            registry_entries.append(registry_entry)
    return registry_entries


def write_registry(entries: List[RegistryEntry], filepath: Path, silent: bool = False) -> Path:
    """Writes a contract registry to a file."""

    if not entries:
        print("No entries provided.")
        return filepath

    # Sort registry entries to enforce common order
    entries = sorted(entries, key=lambda entry: (str(entry.chain_id), entry.name))

    data = defaultdict(dict)
    for entry in entries:
        entry_abi = list(entry.abi)
        entry_abi.sort(key=lambda d: (d["type"], d.get("name", "")))

        data[str(entry.chain_id)][entry.name] = {
            "address": entry.address,
            "abi": entry_abi,
            "tx_hash": entry.tx_hash,
            "block_number": int(entry.block_number),
            "deployer": entry.deployer,
            "constructor_args": list(entry.constructor_args),
        }

    filepath.parent.mkdir(parents=True, exist_ok=True)

    # If the file already exists, attempt to merge the data, if not create a new file
    if filepath.exists():
        if not silent:
            print(f"Updating existing registry at {filepath}.")
        existing_data = _load_json(filepath)

        if any(chain_id in existing_data for chain_id in data):
            filepath = filepath.with_suffix(".unmerged.json")
            if not silent:
                print(
                    "Cannot merge registries with overlapping chain IDs.\n"
                    f"Writing to {filepath} to avoid overwriting existing data."
                )
        else:
            existing_data.update(data)
            data = existing_data
    elif not silent:
        print(f"Creating new registry at {filepath}.")

    with open(filepath, "w") as file:
        json.dump(data, file, **STANDARD_REGISTRY_JSON_FORMAT)

    return filepath


def registry_from_results(
    results: Sequence[DeploymentResult],
    plan: DeploymentPlan,
    output_filepath: Path,
) -> Path:
    """Creates a contract registry from the results of a deployment run."""
    entries = _get_entries(results=results, plan=plan)
    output_filepath = write_registry(entries=entries, filepath=output_filepath)
    print(f"(i) Registry written to {output_filepath}!")
    return output_filepath
