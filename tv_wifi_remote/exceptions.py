#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Exceptions defined by this package"""

class TvRemoteError(Exception):
  """Base class for all error exceptions defined by this package."""
  pass

class InvalidDeviceError(TvRemoteError, ValueError):
  """A DiscoveredDevice was constructed with an invalid IP address or port."""
  pass
