from aiohttp import web

from discovery.model_lister import list_models

from .conftest import models_handler


async def test_single_model_decorated(http_server):
    base = await http_server({"/v1/models": models_handler([{"id": "m1"}])})

    models = await list_models(base)

    assert len(models) == 1
    model = models[0]
    assert model.id == model.alias == model.display_name == "m1"
    assert model.status == "running"


async def test_service_order_preserved(http_server):
    ids = ["Phi-4-mini-instruct-cuda-gpu:4", "qwen2.5-0.5b-instruct-generic-cpu:3", "a-model"]
    base = await http_server({"/v1/models": models_handler([{"id": i} for i in ids])})

    models = await list_models(base)

    assert [m.id for m in models] == ids


async def test_raw_fields_kept_in_dict(http_server):
    base = await http_server({"/v1/models": models_handler([{"id": "m1", "owned_by": "local", "status": "loaded"}])})

    record = (await list_models(base))[0].to_dict()

    assert record == {
        "id": "m1",
        "owned_by": "local",
        "alias": "m1",
        "displayName": "m1",
        "status": "running",
    }


async def test_endpoint_path_is_ignored(http_server):
    base = await http_server({"/v1/models": models_handler([{"id": "m1"}])})
    models = await list_models(f"{base}/openai/status")
    assert [m.id for m in models] == ["m1"]


async def test_entries_without_id_skipped(http_server):
    base = await http_server({"/v1/models": models_handler([{"id": "m1"}, {"name": "x"}, "junk"])})
    assert [m.id for m in await list_models(base)] == ["m1"]


async def test_non_json_body(http_server):
    async def html(request):
        return web.Response(text="<html>nope</html>", content_type="text/html")

    base = await http_server({"/v1/models": html})
    assert await list_models(base) == []


async def test_missing_data_field(http_server):
    async def other(request):
        return web.json_response({"models": [{"id": "m1"}]})

    base = await http_server({"/v1/models": other})
    assert await list_models(base) == []


async def test_not_found(http_server):
    base = await http_server({})
    assert await list_models(base) == []


async def test_unreachable(unused_port):
    assert await list_models(f"http://127.0.0.1:{unused_port}", timeout=1.0) == []


async def test_no_endpoint():
    assert await list_models(None) == []
