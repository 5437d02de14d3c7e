#!/usr/bin/env python3

import argparse
import logging
import sys

from svh_driver.drivers.channels import SVHChannel
from svh_driver.parameters.errors import ConfigError
from svh_driver.parameters.firmware import FirmwareVersion
from svh_driver.parameters.loader import load_parameter_file
from svh_driver.parameters.parameter_resolver import SETTINGS_KINDS, ParameterResolver
from svh_driver.parameters.parameter_table import ParameterTable


def parse_version(text: str) -> FirmwareVersion:
    try:
        major, minor = (int(part) for part in text.split('.'))
        return FirmwareVersion(major, minor)
    except (TypeError, ValueError) as e:
        raise argparse.ArgumentTypeError(f"expected MAJOR.MINOR, got '{text}'") from e


def print_resolved(table, parameters):
    print(f"Firmware {parameters.version}: {len(table)} parameter sets loaded")
    if parameters.record_path is None:
        print("No parameter set matches, the hand keeps its defaults for every channel")
    else:
        print(f"Matched {parameters.record_path}")

    for kind in SETTINGS_KINDS:
        print(f"\n{kind} settings:")
        for channel in SVHChannel:
            settings = getattr(parameters, kind)[channel]
            value = 'default' if settings is None else ', '.join(f"{v:g}" for v in settings)
            print(f"  {channel.name:<24} {value}")

    issues = table.issues + parameters.issues
    if issues:
        print(f"\n{len(issues)} problem(s):")
        for issue in issues:
            print(f"  ⚠️  {issue}")


def main():
    parser = argparse.ArgumentParser(description='Show the SVH parameters used for a firmware version')
    parser.add_argument('parameter_file', help='YAML file with VERSIONS_PARAMETERS')
    parser.add_argument('version', type=parse_version, help='Firmware version, e.g. 3.5')
    parser.add_argument('--strict', action='store_true',
                        help='Exit with an error if any parameter set or value was rejected')

    args = parser.parse_args()
    logging.basicConfig(level=logging.ERROR)

    try:
        table = ParameterTable.from_config(load_parameter_file(args.parameter_file))
    except ConfigError as e:
        print(f"❌ {e}")
        sys.exit(1)

    parameters = ParameterResolver(table).resolve(args.version)
    print_resolved(table, parameters)

    if args.strict and (table.issues or parameters.issues):
        sys.exit(1)


if __name__ == '__main__':
    main()
