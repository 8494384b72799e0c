#!/usr/bin/python3

from swap_deployment.constants import SAED_SWAP_PLAN
from swap_deployment.deployer import Deployer
from swap_deployment.networks import is_local_network


def main():
    """
    Deploys the SAED, SUSD and USDT tokens, owned by the deployer account,
    then the SAEDSwap contract wired to the three token addresses.

    ape run deploy_saed_swap --network ethereum:local:test
    """
    verify = not is_local_network()
    deployer = Deployer.from_yaml(filepath=SAED_SWAP_PLAN, verify=verify)
    saed, susd, usdt, swap = deployer.run()
    print(
        f"\nSAEDSwap at {swap.address} wired to "
        f"SAED {saed.address}, SUSD {susd.address}, USDT {usdt.address}"
    )
