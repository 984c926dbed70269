"""Stdout logging for the App store service.

Every event is one line: either a readable

    <timestamp> <LEVEL> : <deployment> : <environment> : <subsystem> : <message>

line,  or with LOG_JSON=1 a JSON object carrying the same fields plus any
keyword fields passed by the caller.  When SERVICE_LOGGING is set the line is
built and printed by the background worker rather than inside the request
handler that logged it.
"""

import os
import sys
import traceback
import datetime
import json

from appstore.background import run_background

# ========================================================================================

NULL_TIME = "0001-01-01T01:01"


def get_pod_id():
    name = os.environ.get("POD_NAME") or "0"
    return "-".join(name.split("-")[-2:])


def now():
    return trim_time(datetime.datetime.now().isoformat("T"))


def trim_time(t):
    """Trim an ISO timestamp to milliseconds,  NULL_TIME for None."""
    if t is None:
        return NULL_TIME
    if "." not in t:
        return t + ".000"
    return t[: t.index(".") + 4]


# ========================================================================================


class Log:
    def __init__(self, subsystem, json_mode=None, debug_mode=None):
        self.subsystem = subsystem
        self.json_mode = (
            os.environ.get("LOG_JSON") == "1" if json_mode is None else json_mode
        )
        self.debug_mode = (
            os.environ.get("LOG_LEVEL", "INFO").upper() == "DEBUG"
            if debug_mode is None
            else debug_mode
        )
        self.pod_id = get_pod_id()
        self.environment = os.environ.get("ENVIRONMENT", "unknown-environment")
        self.deployment = os.environ.get("DEPLOYMENT_NAME", "unknown-deployment")

    def set_level(self, level):
        """If level is "DEBUG" then enable debug mode and output log.debug
        messages.   Otherwise mute log.debug messages."""
        old, self.debug_mode = self.debug_mode, level.upper() == "DEBUG"
        return old

    def set_json_mode(self, events: bool = False):
        """When False output events as plain text.  When True output one JSON
        object per event.
        """
        old, self.json_mode = self.json_mode, events
        return old

    def log(self, kind, *args, **keys):
        if os.environ.get("SERVICE_LOGGING"):
            run_background(self._log, (kind, now()) + args, keys)
        else:
            self._log(kind, now(), *args, **keys)

    def event(self, kind, timestamp, *args, **keys):
        """Return the dict describing one log event,  caller keys first."""
        return dict(
            keys,
            status=kind,
            subsystem=self.subsystem,
            pod_id=self.pod_id,
            timestamp=timestamp,
            message=" ".join(str(arg) for arg in args),
            service=self.deployment,
            env=self.environment,
        )

    def plain_line(self, event):
        head = f"{event['timestamp']} {event['status']}"
        return " : ".join(
            [head, self.deployment, self.environment, self.subsystem, event["message"]]
        )

    def _log(self, kind, timestamp, *args, **keys):
        json_mode = keys.pop("json_mode", self.json_mode)
        event = self.event(kind, timestamp, *args, **keys)
        print(json.dumps(event, default=str) if json_mode else self.plain_line(event))
        sys.stdout.flush()
        return event

    def debug(self, *args, **keys):
        if self.debug_mode:
            return self.log("DEBUG", *args, **keys)

    def info(self, *args, **keys):
        return self.log("INFO", *args, **keys)

    def warning(self, *args, **keys):
        return self.log("WARN", *args, **keys)

    def error(self, *args, **keys):
        return self.log("ERROR", *args, **keys)

    def critical(self, *args, **keys):
        return self.log("CRITICAL", *args, **keys)

    def exception(self, exc, *args, **keys):
        """Log `exc` as a JSON error event regardless of json_mode."""
        keys = dict(keys)
        keys.update(
            {
                "error.stack": traceback.format_exc(),
                "error.message": " ".join([str(arg) for arg in args]),
                "error.kind": exc.__class__.__name__,
            }
        )
        return self.error(*args, json_mode=True, **keys)
