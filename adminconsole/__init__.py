"""Directory Admin Console package.

To drive the console programmatically:
    from adminconsole.config import load_settings
    from adminconsole.core.controller import ConsoleController

To call the administrative API directly:
    from adminconsole.core.api import ApiGateway, ApiError
"""
