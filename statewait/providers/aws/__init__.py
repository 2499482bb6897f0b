"""AWS support for statewait.

Example:
    from injector import Injector
    from statewait.providers.aws import AWS, AWSModule, RDSClientFactory

    rds = Injector([AWSModule(AWS(region="us-east-1"))]).get(RDSClientFactory)
"""

from statewait.providers.aws.clients import AWSModule, RDSClientFactory
from statewait.providers.aws.config import AWS

__all__ = ["AWS", "AWSModule", "RDSClientFactory"]
