from clipshot.config import ClipshotConfig
from clipshot.delivery.base import DeliverySink, generate_filename
from clipshot.delivery.local import LocalSink
from clipshot.delivery.remote import RemoteSink
from clipshot.models.delivery import DeliveryTarget


def get_sink(target: DeliveryTarget, config: ClipshotConfig) -> DeliverySink:
    if target.is_local:
        return LocalSink(config.local_dir)
    return RemoteSink(
        target.host,
        remote_dir=config.remote_dir,
        ssh_command=config.ssh_command,
        multiplex=config.ssh_multiplex,
        timeout=config.transfer_timeout,
        resolve_timeout=config.read_timeout,
    )


__all__ = [
    'DeliverySink',
    'LocalSink',
    'RemoteSink',
    'generate_filename',
    'get_sink',
]
