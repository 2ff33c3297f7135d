#!/usr/bin/env python3
"""
Simple example driving the timeline against an in-process busy endpoint.
Renders a three-day view, steps forward a day, and prints each render.
"""

import asyncio
from datetime import datetime, timedelta, timezone
import json
import logging
import sys
import os

import httpx

# Add parent directory to path so we can import timeline
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from timeline import BusyClient, DisplayTree, TimelineConfig, TimelineController


def busy_endpoint(request: httpx.Request) -> httpx.Response:
    """Answer every range with a standup each morning and a long review on day two."""
    body = json.loads(request.content)
    time_min = datetime.fromisoformat(body['timeMin'].replace('Z', '+00:00'))
    time_max = datetime.fromisoformat(body['timeMax'].replace('Z', '+00:00'))

    standups = []
    day = time_min
    while day < time_max:
        standups.append({
            'start': (day + timedelta(hours=9)).isoformat(),
            'end': (day + timedelta(hours=9, minutes=15)).isoformat(),
        })
        day += timedelta(days=1)

    review_start = time_min + timedelta(days=1, hours=13, minutes=30)
    return httpx.Response(200, json={
        'calendars': {
            'work': {'busy': standups},
            'personal': {'busy': [{
                'start': review_start.isoformat(),
                'end': (review_start + timedelta(hours=2)).isoformat(),
            }]},
        }
    })


def print_tree(tree: DisplayTree) -> None:
    for column in tree.days:
        accent = ' *' if column.is_today else ''
        print(f"{column.weekday} {column.date_label}{accent}")
        for slot in column.slots:
            print(f"    {slot.top_px:7.1f}px +{slot.height_px:5.1f}px  {slot.label}")
        if column.now_marker is not None:
            print(f"    {column.now_marker.top_px:7.1f}px  -- now --")
    print()


async def main():
    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    config = TimelineConfig(fetch_debounce_ms=50, resize_debounce_ms=50)
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(busy_endpoint))
    client = BusyClient(config.endpoint_url, config.tz_offset_ms, http_client=http_client)

    controller = TimelineController(
        client,
        config,
        width=500,
        on_render=print_tree,
        on_scroll=lambda px: print(f"scroll to {px:.0f}px\n"),
    )

    print(f"Rendering {controller.state.days_per_screen} days at "
          f"{datetime.now(timezone.utc).astimezone():%Y-%m-%d %H:%M}...\n")

    controller.start()
    await controller.drain()

    controller.next_day()
    await asyncio.sleep(0.1)
    await controller.drain()

    await controller.aclose()
    await http_client.aclose()


if __name__ == '__main__':
    asyncio.run(main())
