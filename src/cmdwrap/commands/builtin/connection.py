"""Database connection arguments shared by the built-in commands."""

from cmdwrap.commands import obfuscation
from cmdwrap.commands.definition import CommandBuilder


def define_connection_arguments(builder: CommandBuilder) -> None:
    """Declare the connection arguments every database command accepts."""
    builder.argument("url", str).required().description(
        "The JDBC database connection URL"
    ).build()
    builder.argument("defaultSchemaName", str).description(
        "The default schema name to use for the database connection"
    ).build()
    builder.argument("defaultCatalogName", str).description(
        "The default catalog name to use for the database connection"
    ).build()
    builder.argument("driver", str).description("The JDBC driver class").build()
    builder.argument("driverPropertiesFile", str).description(
        "The JDBC driver properties file"
    ).build()
    builder.argument("username", str).description(
        "Username to use to connect to the database"
    ).build()
    (
        builder.argument("password", str)
        .description("Password to use to connect to the database")
        .set_value_obfuscator(obfuscation.STANDARD)
        .build()
    )
