"""This module defines the Quart app which is the web server for the App
resource service.  The Quart app serves the REST API used to create, fetch,
update and delete Apps.  It also hosts the background event loop used to run
blocking operations such as outputting log messages.

Defining the app here alone allows it to be imported without other entanglements
from the appstore package which might otherwise cause circular imports.
"""
from quart import Quart

# -------------------------------------------------------------------------------------

app = Quart(__name__)
