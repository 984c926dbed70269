"""This module implements a small background event loop fed by a queue which
conveys deferred procedure calls and their parameters.  Request handlers use
it to push comparatively slow work, chiefly formatting and printing log
messages, out of the request/response path.

The worker task only exists while the Quart app is serving.  Outside of that
window (library use, the Quart test client) deferred calls run inline.
"""

import os
import sys
import asyncio

from appstore.app import app

# -------------------------------------------------------------------------------------

MAX_QUEUE = int(os.environ.get("APPSTORE_BACKGROUND_QUEUE", "10000"))

background_queue: asyncio.Queue = asyncio.Queue(maxsize=MAX_QUEUE)

dropped_calls = 0


async def background_worker():
    while True:
        (func, args, keys) = await background_queue.get()
        try:
            func(*args, **keys)
        except Exception as e:
            print(f"Background error in {func.__name__}: {e}", file=sys.stderr)
        finally:
            background_queue.task_done()


@app.before_serving
async def startup():
    global background_queue
    background_queue = asyncio.Queue(maxsize=MAX_QUEUE)  # bound to this loop
    app.background_loop = asyncio.get_running_loop()
    app.background_task = asyncio.create_task(background_worker())


@app.after_serving
async def shutdown():
    await background_queue.join()
    app.background_task.cancel()
    try:
        await app.background_task
    except asyncio.CancelledError:
        pass
    app.background_task = None
    app.background_loop = None


def is_serving() -> bool:
    """True while the background worker task is alive."""
    task = getattr(app, "background_task", None)
    return task is not None and not task.done()


def on_worker_loop() -> bool:
    """True when called from the event loop thread the worker runs on."""
    try:
        return asyncio.get_running_loop() is getattr(app, "background_loop", None)
    except RuntimeError:
        return False


def enqueue(func, args, keys):
    """Put one call on the queue.  Must run on the worker's loop thread."""
    global dropped_calls
    try:
        background_queue.put_nowait((func, args, keys))
    except asyncio.QueueFull:
        dropped_calls += 1
        print(
            f"APPSTORE ERROR Background queue overflow on {func.__name__}",
            file=sys.stderr,
        )


def run_background(func, args, keys):
    """Queue func(*args, **keys) for the worker,  or call it now if no worker
    is running.  Calls from other threads are handed to the worker's loop,
    asyncio.Queue is not thread-safe.  Calls are dropped,  not blocked on,
    when the queue is full.
    """
    if not is_serving():
        func(*args, **keys)
    elif on_worker_loop():
        enqueue(func, args, keys)
    else:
        app.background_loop.call_soon_threadsafe(enqueue, func, args, keys)
