from .pagination_controller import LoadState, PaginationController
from .partitions import PartitionSequence, default_partition_codes

__all__ = ["LoadState", "PaginationController", "PartitionSequence", "default_partition_codes"]
