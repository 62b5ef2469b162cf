"""
IaaS Platform - Server and Disk Orchestration Control Plane

A single-node infrastructure-as-a-service control plane that creates
servers, attaches disks, and persists authoritative resource state to
local files.
"""

__version__ = "0.1.0"
__author__ = "Systems Engineering Portfolio"
