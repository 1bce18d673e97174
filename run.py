import asyncio
import sys

import aiohttp
from rich import print
from rich.markup import escape

from panostitch.config import PanoConfig
from panostitch.core import fetch_panos
from panostitch.errors import CancellationError
from panostitch.my_utils import (
    open_dataset,
    parse_args,
    timer
)

async def main(args) -> tuple[int, int, str]:
    config = PanoConfig.from_args(args)
    panoids = args.panoid or open_dataset(args.dataset)

    if limit:= args.limit:
        panoids = panoids[:limit]

    cancel = asyncio.Event()
    if args.deadline is not None:
        asyncio.get_running_loop().call_later(args.deadline, cancel.set)

    connector = aiohttp.TCPConnector(limit=args.conn_limit)

    return await fetch_panos(panoids, config, args.output, connector, cancel)


if __name__ == "__main__":
    exit_code = 1
    try:
        args = parse_args()

        with timer() as t:
            total_panos, successful_panos, output_dir = asyncio.run(main(args))

        print(f"\n[gray]{'-' * 85}[/]")
        print(f"\n[orange1]| Processed [green]{successful_panos}/{total_panos}[/] panos in [green]{t.time_elapsed}[/][/]")
        print(f"[orange1]| Saved at [green]{output_dir}[/][/]\n")
        if successful_panos == total_panos:
            exit_code = 0
    except CancellationError as error:
        print(f"[red][MAIN] Deadline reached: {escape(str(error))}[/]")
    except Exception as error:
        print(f"[red][MAIN] Error: {escape(str(error))}[/]")
    except KeyboardInterrupt:
        print("[red]Keyboard Interrupted[/]")
    sys.exit(exit_code)
