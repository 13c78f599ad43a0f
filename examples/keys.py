""" Stream the user's model and report every key or button event from the
    web clients viewing it. A key press lights the whole display white, a
    release turns it black again.

    The server at the configured URL must accept the "KIND"-tagged payloads
    produced by lighthouse.protocol.codec; see lighthouse.config.
"""

import logging

import lighthouse
from lighthouse.client import input_events


def main():
    """Main entry point for the demonstration."""
    import argparse

    parser = argparse.ArgumentParser(
        description='Print input events from the lighthouse'
    )
    parser.add_argument(
        '--url',
        help='Server URL (default: %s)' % (lighthouse.config.url),
        default=None
    )

    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)

    with lighthouse.Lighthouse(url=args.url) as client:
        with client.stream_model() as stream:
            try:
                for event in input_events(stream):
                    print(event)

                    if event.down:
                        client.send_frame(lighthouse.Frame(lighthouse.Color.WHITE))
                    else:
                        client.send_frame(lighthouse.Frame())
            except KeyboardInterrupt:
                pass

        client.stop(client.model)


if __name__ == '__main__':
    main()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
