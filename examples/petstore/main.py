"""Print petstore schema graphs.

Provides two targets:
- contracts (OwnerContract and PetContract, mutually recursive)
- adoption  (a dataclass mixing a contract and a discriminated model union)
"""

from __future__ import annotations

import argparse
import json

from contracts import Adoption, PetContract

from schemagraph import build_document
from schemagraph.core.logging import configure_logging

TARGETS = {"contracts": PetContract, "adoption": Adoption}


def main() -> None:
    parser = argparse.ArgumentParser(description="Print petstore schema graphs")
    parser.add_argument(
        "--target",
        choices=sorted(TARGETS),
        default="contracts",
        help="Graph to build",
    )
    args = parser.parse_args()

    configure_logging(level="INFO")
    print(json.dumps(build_document(TARGETS[args.target]), indent=2, default=str))


if __name__ == "__main__":
    main()
