from .flow import StFlow, FlowType
from .residual import ResidualAssembler
from .snapshot import FlowSnapshot
