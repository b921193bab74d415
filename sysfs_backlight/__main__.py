import argparse
import logging
import sys
from typing import List, Optional

import sysfs_backlight as SBL
from sysfs_backlight import config as _config
from sysfs_backlight.exceptions import BacklightError

QUICK_HELP = '''\
sysfs_backlight: A backlight utility for Linux that plays well with hybrid GPUs

Common commands:
    inc [amount]  -> increase brightness by the given percentage
    dec [amount]  -> decrease brightness by the given percentage
    set [value]   -> set brightness to the given percentage
    status        -> show light status
    list          -> list all lights

Use `help' to display all commands and options'''

EXAMPLES = '''\
examples:
    status              show status of the default light
    inc 5 --sweep       increase brightness smoothly by 5%
    set 10              set brightness to 10%
    inc 2 -s -d nvidia_0
                        increase nvidia_0's brightness smoothly by 2%'''


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='sysfs_backlight',
        description='A backlight utility for Linux that plays well with hybrid GPUs',
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='enable debug logging and detailed errors')
    parser.add_argument('-V', '--version', action='store_true', help='print the current version')

    device_parser = argparse.ArgumentParser(add_help=False)
    device_parser.add_argument('-d', '--device', help='the light to use instead of the default one')

    sweep_parser = argparse.ArgumentParser(add_help=False)
    sweep_parser.add_argument('-s', '--sweep', action='store_true', help='change the brightness gradually')

    commands = parser.add_subparsers(dest='command', metavar='command')
    status = commands.add_parser('status', parents=[device_parser], help='show light status')
    status.add_argument('name', nargs='?', help='the light to show')
    commands.add_parser('list', help='list all lights')
    for name, verb in (('inc', 'increase'), ('dec', 'decrease')):
        sub = commands.add_parser(name, parents=[device_parser, sweep_parser], help=f'{verb} brightness')
        sub.add_argument(
            'amount', nargs='?', type=int, default=_config.ADJUST_AMOUNT,
            help=f'percentage to {verb} the brightness by (default: {_config.ADJUST_AMOUNT})'
        )
    set_cmd = commands.add_parser('set', parents=[device_parser], help='set brightness to a percentage')
    set_cmd.add_argument('value', type=int, help='the new brightness percentage')
    commands.add_parser('save', parents=[device_parser], help='save the current brightness to restore later')
    commands.add_parser('restore', parents=[device_parser], help='restore the saved brightness')
    commands.add_parser('toggle', parents=[device_parser], help='switch a light fully on or off')
    commands.add_parser('help', help='display help')
    return parser


def print_status(light: SBL.Light):
    write_permission = 'Ok' if light.writable() else 'Denied'
    print(
        'Device status\n'
        f'Detected device: {light.name}\n'
        f'Kind: {light.kind.value}\n'
        f'Priority: {light.tier.name.lower()}\n'
        f'Write permission: {write_permission}\n'
        f'Current brightness: {light.current()} ({light.current_percent()}%)\n'
        f'Max brightness: {light.max()}'
    )
    if light.led_name is not None:
        device, color, function = light.led_name
        print(
            f'LED device: {device or "unknown"}\n'
            f'LED color: {color or "unknown"}\n'
            f'LED function: {function or "unknown"}'
        )


def print_lights(result: SBL.ScanResult):
    print('Detected lights')
    for light in result.lights:
        print(f'{light.name} [{light.kind.value}] {light.current_percent()}%')
    for path, error in result.failures:
        print(f'Warning: skipped {path}: {error}', file=sys.stderr)


def run(args: argparse.Namespace, parser: argparse.ArgumentParser, config: SBL.Config) -> Optional[str]:
    '''
    Execute a parsed command.

    Returns:
        A success message to print, if any
    '''
    device = getattr(args, 'device', None)

    if args.command == 'status':
        print_status(SBL.get_light(args.name or device, config))
    elif args.command == 'list':
        result = SBL.scan_lights(config)
        if not result.lights:
            for path, error in result.failures:
                print(f'Warning: skipped {path}: {error}', file=sys.stderr)
            raise SBL.DeviceNotFoundError('no qualifying lights detected')
        print_lights(result)
    elif args.command == 'inc':
        value = SBL.increase_brightness(args.amount, device=device, sweep=args.sweep, config=config)
        return f'Brightness increased to {value}%'
    elif args.command == 'dec':
        value = SBL.decrease_brightness(args.amount, device=device, sweep=args.sweep, config=config)
        return f'Brightness decreased to {value}%'
    elif args.command == 'set':
        value = SBL.set_brightness(args.value, device=device, config=config)
        return f'Brightness set to {value}%'
    elif args.command == 'save':
        SBL.save(device=device, config=config)
        return 'Current brightness saved'
    elif args.command == 'restore':
        value = SBL.restore(device=device, config=config)
        return f'Saved brightness restored ({value}%)'
    elif args.command == 'toggle':
        value = SBL.toggle(device=device, config=config)
        return f'Light toggled {"on" if value else "off"}'
    elif args.command == 'help':
        parser.print_help()
    return None


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(levelname)s %(name)s: %(message)s')

    if args.version:
        print(SBL.__version__)
        return 0
    if args.command is None:
        print(QUICK_HELP)
        return 0

    try:
        message = run(args, parser, SBL.Config.from_env())
    except BacklightError as e:
        print(f'Error: {e}', file=sys.stderr)
        if args.verbose and e.__cause__ is not None:
            print(f'Caused by: {type(e.__cause__).__name__}: {e.__cause__}', file=sys.stderr)
        if e.tip:
            print(f'Tip: {e.tip}', file=sys.stderr)
        return 1

    if message:
        print(f'Success: {message}')
    return 0


if __name__ == '__main__':
    sys.exit(main())
