import json
from typing import Optional

import click

from .configuration import AppConfig
from .entities import MerchantLocatorError, TransportError, UpstreamSuccess
from .infrastructure.http.merchant_api import result_to_response
from .services.merchant_search import MerchantSearchService
from .utils.logging_utils import attach_uvicorn_to_my_logger, get_logger, init_logger

logger = get_logger()


def load_configuration(configuration_file_path: Optional[str]) -> AppConfig:
    if configuration_file_path:
        return AppConfig.from_file(configuration_file_path)

    from dotenv import load_dotenv
    load_dotenv()

    return AppConfig.from_env()


@click.group()
@click.option("--configuration-file", "configuration_file_path", type=click.Path(exists=True, dir_okay=False), default=None, help="Path to a YAML configuration file. Environment variables (and .env) are used when omitted.")
@click.pass_context
def cli(
    context: click.Context,
    configuration_file_path: Optional[str],
):
    configuration = load_configuration(configuration_file_path)
    init_logger(configuration.logging)

    context.obj = configuration


@cli.command()
@click.option("--host", type=str, default=None, help="Bind address, overrides the configuration.")
@click.option("--port", type=int, default=None, help="Bind port, overrides the configuration.")
@click.pass_obj
def serve(
    configuration: AppConfig,
    host: Optional[str],
    port: Optional[int],
):
    import uvicorn

    from .infrastructure.http import MerchantApiServices, create_merchant_api

    app = create_merchant_api(MerchantApiServices(
        merchant_search_service=MerchantSearchService.from_config(configuration),
    ))

    attach_uvicorn_to_my_logger()

    host = host or configuration.server.host
    port = port or configuration.server.port
    logger.info("Server running on http://%s:%d", host, port)

    uvicorn.run(app, host=host, port=port, log_config=None)


@cli.command()
@click.option("--lat", "lat", type=str, required=True, help="Latitude of the search center.")
@click.option("--lng", "lng", type=str, required=True, help="Longitude of the search center.")
@click.option("--radius-km", type=str, default=None, help="Search radius in kilometers (0.1-50).")
@click.option("--limit", type=str, default=None, help="Maximum number of merchants (1-100).")
@click.option("--name", type=str, default=None, help="Merchant name filter.")
@click.pass_obj
def search(
    configuration: AppConfig,
    lat: str,
    lng: str,
    radius_km: Optional[str],
    limit: Optional[str],
    name: Optional[str],
):
    service = MerchantSearchService.from_config(configuration)

    try:
        result = service.search_query(lat, lng, radius_km, limit, name)
    except MerchantLocatorError as error:
        logger.error(str(error))
        raise click.Abort()

    response = result_to_response(result)
    click.echo(json.dumps(json.loads(response.body), indent=2))

    if not isinstance(result, UpstreamSuccess):
        if isinstance(result, TransportError):
            logger.error("upstream unreachable: %s", result.message)
        raise SystemExit(1)


@cli.command()
@click.argument("url")
@click.option("--method", type=str, default="GET", show_default=True, help="HTTP method of the request to sign.")
@click.option("--body", type=str, default="", help="Request body to bind with the body hash.")
@click.pass_obj
def sign(
    configuration: AppConfig,
    url: str,
    method: str,
    body: str,
):
    """Print the Authorization header value for a request."""
    service = MerchantSearchService.from_config(configuration)

    try:
        authorization = service.sign(method, url, body.encode("utf-8"))
    except MerchantLocatorError as error:
        logger.error(str(error))
        raise click.Abort()

    click.echo(authorization.value)


@cli.command("check-credentials")
@click.pass_obj
def check_credentials(
    configuration: AppConfig,
):
    """Resolve the signing key and print its public key fingerprint."""
    service = MerchantSearchService.from_config(configuration)

    try:
        service.consumer_key()
        key_material = service.resolver.resolve()
    except MerchantLocatorError as error:
        logger.error(str(error))
        raise click.Abort()

    click.echo(f"sha256:{key_material.fingerprint()}")


if __name__ == "__main__":
    cli()
