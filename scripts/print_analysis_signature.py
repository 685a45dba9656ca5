from __future__ import annotations

import argparse
import pprint

from fx_coach.config import load_config
from fx_coach.profiles import analysis_signature, PROFILE_DEFAULTS


def main():
    p = argparse.ArgumentParser(description="Print the effective analysis inputs for a config")
    p.add_argument("--config", default=None, help="Path to YAML config")
    args = p.parse_args()

    cfg = load_config(args.config)
    sig = analysis_signature(cfg.analysis)

    print(f"ANALYSIS INPUTS (profile={cfg.analysis.profile}):")
    pprint.pprint(sig)
    print("\nPROFILE DEFAULTS:")
    pprint.pprint(PROFILE_DEFAULTS)


if __name__ == "__main__":
    main()
