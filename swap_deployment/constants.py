from pathlib import Path

import swap_deployment

#
# Filesystem
#

DEPLOYMENT_DIR = Path(swap_deployment.__file__).parent
CONSTRUCTOR_PARAMS_DIR = DEPLOYMENT_DIR / "constructor_params"
REGISTRY_DIR = DEPLOYMENT_DIR / "registries"

# Truffle default; Hardhat uses artifacts/, Foundry out/
DEFAULT_BUILD_DIR = Path("build") / "contracts"

#
# Networks
#

LOCAL_BLOCKCHAIN_ENVIRONMENTS = ["local", "development"]

#
# Contracts
#

ZERO_ADDRESS = "0x" + "0" * 40

SAED_SWAP_PLAN = CONSTRUCTOR_PARAMS_DIR / "saed-swap.yml"
