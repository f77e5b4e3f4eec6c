"""AGV UDP 통신 인프라 (AgvGateway 구현)."""

from yarn_guardian.infra.agv.udp_agv_transport import UdpAgvTransport

__all__ = ["UdpAgvTransport"]
