""" Fill the user's display with a new random color, or random noise, a few
    times per second. The credential is taken from the LIGHTHOUSE_USER and
    LIGHTHOUSE_TOKEN environment variables unless specified on the command
    line.

    The server at the configured URL must accept the "KIND"-tagged payloads
    produced by lighthouse.protocol.codec; see lighthouse.config.
"""

import logging
import time

import lighthouse


def run(client, interval, noise=False):

    while True:
        if noise:
            frame = lighthouse.Frame.random()
        else:
            frame = lighthouse.Frame(lighthouse.Color.random())

        client.send_frame(frame, timeout=5)
        time.sleep(interval)


def main():
    """Main entry point for the demonstration."""
    import argparse

    parser = argparse.ArgumentParser(
        description='Display random colors on the lighthouse'
    )
    parser.add_argument(
        '-u', '--user',
        help='Lighthouse username (default: $LIGHTHOUSE_USER)',
        default=None
    )
    parser.add_argument(
        '-t', '--token',
        help='API token (default: $LIGHTHOUSE_TOKEN)',
        default=None
    )
    parser.add_argument(
        '--url',
        help='Server URL (default: %s)' % (lighthouse.config.url),
        default=None
    )
    parser.add_argument(
        '-i', '--interval',
        help='Seconds between frames (default: 0.5)',
        type=float,
        default=0.5
    )
    parser.add_argument(
        '--noise',
        help='Give every window its own color',
        action='store_true'
    )

    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    credential = lighthouse.config.credential(args.user, args.token)

    with lighthouse.Lighthouse(credential, args.url) as client:
        try:
            run(client, args.interval, args.noise)
        except KeyboardInterrupt:
            pass


if __name__ == '__main__':
    main()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
