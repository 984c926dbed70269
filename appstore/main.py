"""Top level library module providing the App store.

The AppStore keeps every App in a process-wide in-memory mapping from id to
App.  All access goes through its methods,  each of which holds the store lock
for the whole read-modify-write so concurrent request handlers (or threads of
a library caller) never observe or produce a half-applied change.
"""

import threading

from appstore.types import App, AppId, AppUpdateRequest
from appstore.errors import NotFoundError, ValidationError
from appstore.log import Log


# -----------------------------------------------------------------------------------------
#                  API Class Implementing the App Store Operations
# -----------------------------------------------------------------------------------------


class AppStore:
    """Maintains the Apps in memory,  a log interface,  and a lock serializing
    all access to the mapping and to the id counter.
    """

    def __init__(self):
        self.apps: dict[AppId, App] = {}
        self.last_id = 0
        self.log = Log("appstore")
        self.lock = threading.Lock()

    # ............................... queries .......................................

    def get(self, app_id: str) -> App:
        """Return the App stored under `app_id`,  NotFoundError if there is none."""
        with self.lock:
            return self._locked_get(app_id)

    def _locked_get(self, app_id: str) -> App:
        try:
            app_id = AppId(app_id)
        except (TypeError, ValueError) as e:
            raise NotFoundError(app_id) from e
        app = self.apps.get(app_id)
        if app is None or not app.id:
            raise NotFoundError(app_id)
        return app

    def count(self) -> int:
        with self.lock:
            return len(self.apps)

    def list_ids(self) -> list[AppId]:
        with self.lock:
            return list(self.apps)

    # ............................... mutations .......................................

    def create(self, request: AppUpdateRequest) -> App:
        """Validate `request` and store a new App built from it under a freshly
        generated id.  Ids come from a counter which never goes backwards,  so an
        id freed by delete() is never handed out again.
        """
        self.validate(request)
        with self.lock:
            self.last_id += 1
            app = App(
                id=AppId(str(self.last_id)),
                label=request.label.value,
                description=request.description.value,
            )
            self.apps[app.id] = app
        self.log.info(f"Created {app!r}.")
        return app

    def update(self, app_id: str, request: AppUpdateRequest, strict: bool) -> App:
        """Apply `request` to the App stored under `app_id`.

        When `strict` (full update) every required field must be present and all
        of them are replaced.  Otherwise (partial update) absent fields keep
        their current values.
        """
        with self.lock:
            app = self._locked_get(app_id)
            if strict:
                self.validate(request)
            app = app.updated(request)
            self.apps[app.id] = app
        self.log.info(f"Updated {app!r} strict={strict}.")
        return app

    def delete(self, app_id: str) -> bool:
        """Remove the App stored under `app_id` if there is one.  Deleting an
        unknown id is not an error.  Returns True IFF an App was removed.
        """
        with self.lock:
            try:
                removed = self.apps.pop(AppId(app_id), None) is not None
            except (TypeError, ValueError):
                removed = False
        self.log.info(f"Deleted app id={app_id!r} existed={removed}.")
        return removed

    def clear(self) -> None:
        """Drop every App and restart id generation at 1."""
        with self.lock:
            self.apps.clear()
            self.last_id = 0
        self.log.info("Cleared all apps.")

    # ...............................................................................

    @staticmethod
    def validate(request: AppUpdateRequest) -> None:
        """ValidationError naming the first required field which is absent."""
        missing = request.missing_fields()
        if missing:
            raise ValidationError(missing[0])


# -----------------------------------------------------------------------------------------
#                            Store Singleton and Convenience Functions
# -----------------------------------------------------------------------------------------

APP_STORE: AppStore | None = None


def init_store(reinit: bool = True) -> AppStore:
    """Initialize the AppStore singleton."""
    global APP_STORE
    if reinit or not APP_STORE:
        APP_STORE = AppStore()
    return APP_STORE


def get_app(app_id: str) -> App:
    return init_store(reinit=False).get(app_id)


def create_app(request: AppUpdateRequest) -> App:
    return init_store(reinit=False).create(request)


def update_app(app_id: str, request: AppUpdateRequest, strict: bool = True) -> App:
    return init_store(reinit=False).update(app_id, request, strict)


def delete_app(app_id: str) -> bool:
    return init_store(reinit=False).delete(app_id)
