from __future__ import annotations

import asyncio

from tv_wifi_remote import SsdpClient, SsdpDatagram, NetworkProbe, TvRemoteConfig

OK_REPLY = (
    b"HTTP/1.1 200 OK\r\n"
    b"ST: roku:ecp\r\n"
    b"LOCATION: http://127.0.0.1:8060/\r\n"
    b"USN: uuid:roku:ecp:1234\r\n"
    b"SERVER: Roku/9.4.0 UPnP/1.0\r\n"
    b"\r\n"
)

ERROR_REPLY = b"HTTP/1.1 404 Not Found\r\n\r\n"

NOTIFY = b"NOTIFY * HTTP/1.1\r\nNTS: ssdp:alive\r\n\r\n"

class FakeSsdpResponder(asyncio.DatagramProtocol):
    """Answers every M-SEARCH it receives with a fixed set of datagrams."""

    def __init__(self, replies):
        self.replies = replies
        self.requests = []
        self.transport = None

    def connection_made(self, transport):
        self.transport = transport

    def datagram_received(self, data, addr):
        self.requests.append(SsdpDatagram.from_raw_data(data))
        for reply in self.replies:
            self.transport.sendto(reply, addr)

async def start_responder(replies):
    loop = asyncio.get_running_loop()
    transport, responder = await loop.create_datagram_endpoint(
        lambda: FakeSsdpResponder(replies),
        local_addr=('127.0.0.1', 0),
      )
    port = transport.get_extra_info('sockname')[1]
    return transport, responder, port

def test_search_collects_only_ok_replies():
    async def amain():
        transport, responder, port = await start_responder([NOTIFY, ERROR_REPLY, OK_REPLY])
        try:
            async with SsdpClient(
                    response_wait_time=0.5,
                    multicast_address='127.0.0.1',
                    multicast_port=port,
                    bind_addresses=['127.0.0.1'],
                  ) as client:
                infos = await client.simple_search('roku:ecp')
        finally:
            transport.close()
        return responder, port, infos

    responder, port, infos = asyncio.run(amain())

    assert len(responder.requests) == 1
    request = responder.requests[0]
    assert request.statement_line == "M-SEARCH * HTTP/1.1"
    assert request.get_header('ST') == 'roku:ecp'
    assert request.get_header('MAN') == '"ssdp:discover"'
    assert request.get_header('HOST') == f'127.0.0.1:{port}'

    assert len(infos) == 1
    response = infos[0].response
    assert response.ip == '127.0.0.1'
    assert response.location == 'http://127.0.0.1:8060/'
    assert response.usn == 'uuid:roku:ecp:1234'

def test_search_can_include_error_replies():
    async def amain():
        transport, _, port = await start_responder([ERROR_REPLY, OK_REPLY])
        try:
            async with SsdpClient(
                    response_wait_time=0.5,
                    multicast_address='127.0.0.1',
                    multicast_port=port,
                    bind_addresses=['127.0.0.1'],
                  ) as client:
                return await client.simple_search(include_error_responses=True)
        finally:
            transport.close()

    infos = asyncio.run(amain())
    assert sorted(info.datagram.status_code for info in infos) == [200, 404]

def test_probe_discovery_merges_targets_by_ip():
    async def amain():
        transport, responder, port = await start_responder([OK_REPLY])
        try:
            probe = NetworkProbe(
                TvRemoteConfig(bind_addresses=('127.0.0.1',)),
                multicast_address='127.0.0.1',
                multicast_port=port,
              )
            responses = await probe.discover_ssdp(timeout=0.5)
        finally:
            transport.close()
        return responder, responses

    responder, responses = asyncio.run(amain())
    targets = sorted(r.get_header('ST') for r in responder.requests)
    assert targets == sorted(TvRemoteConfig().search_targets)
    assert len(responses) == 1
    assert responses[0].ip == '127.0.0.1'

def test_search_that_cannot_bind_returns_nothing():
    async def amain():
        probe = NetworkProbe(TvRemoteConfig(bind_addresses=('203.0.113.77',)))
        return await probe.send_multicast_search('ssdp:all', 0.2)

    assert asyncio.run(amain()) == []
