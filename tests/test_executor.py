import httpx
import pytest
import pytest_asyncio

from meta_adapter.api.execution.executor import Executor, substitute_params

DOG_IMAGE = {"message": "https://images.dog.ceo/breeds/hound-afghan/n02088094_1003.jpg", "status": "success"}


@pytest_asyncio.fixture
async def initialized(engine):
    await engine.initialize()
    return engine


def make_executor(engine, **kwargs):
    return Executor(engine.synchronizer, engine.composer, client=engine.client, **kwargs)


def test_substitute_params():
    assert substitute_params("/breed/{breed}/images", {"breed": "german shepherd"}) == "/breed/german%20shepherd/images"
    assert substitute_params("/a/{x}/{y}", {"x": 1}) == "/a/1/{y}"
    assert substitute_params("/q?lat={lat}", {"lat": 40.7128}) == "/q?lat=40.7128"


@pytest.mark.asyncio
async def test_execute_dog_ceo(initialized, upstream):
    upstream.add("https://dog.ceo/api/breeds/image/random", json=DOG_IMAGE)

    result = await initialized.executor.execute_endpoint("public.dog_ceo.random", {})

    assert result.success
    assert result.data == DOG_IMAGE
    assert result.api_name == "Dog CEO"
    assert result.endpoint == "random"
    assert result.status_code == 200
    assert result.to_response()["apiName"] == "Dog CEO"
    assert upstream.requests[0].headers["User-Agent"] == "MetaAdapter/1.0"


@pytest.mark.asyncio
async def test_unknown_endpoint(initialized, upstream):
    result = await initialized.executor.execute_endpoint("public.nope.nothing")

    assert not result.success
    assert result.error == "Endpoint not found: public.nope.nothing"
    assert result.api_name == "unknown"
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_missing_required_params_skip_the_call(initialized, upstream):
    result = await initialized.executor.execute_endpoint("public.dog_ceo.breed", {})

    assert not result.success
    assert result.missing_params == ["breed"]
    assert result.error == "Missing required parameters: breed"
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_params_are_url_encoded(initialized, upstream):
    await initialized.executor.execute_endpoint("public.dog_ceo.breed", {"breed": "german shepherd"})

    assert upstream.urls() == ["https://dog.ceo/api/breed/german%20shepherd/images"]


@pytest.mark.asyncio
async def test_text_response(initialized, upstream):
    upstream.add("http://numbersapi.com/random/trivia", text="42 is the answer.")

    result = await initialized.executor.execute_endpoint("public.numbers.random")

    assert result.success
    assert result.data == "42 is the answer."


@pytest.mark.asyncio
async def test_binary_response_is_described(initialized, upstream):
    upstream.add_handler(
        "https://dog.ceo",
        lambda request: httpx.Response(200, content=b"\x89PNG", headers={"content-type": "image/png"}),
    )

    result = await initialized.executor.execute_endpoint("public.dog_ceo.random")

    assert result.data == {
        "url": "https://dog.ceo/api/breeds/image/random",
        "status": 200,
        "contentType": "image/png",
    }


@pytest.mark.asyncio
async def test_http_error_status(initialized, upstream):
    upstream.add("https://dog.ceo", status_code=500)

    result = await initialized.executor.execute_endpoint("public.dog_ceo.random")

    assert not result.success
    assert result.status_code == 500
    assert result.error == "HTTP 500: Internal Server Error"


@pytest.mark.asyncio
async def test_connection_error(initialized, upstream):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    upstream.add_handler("https://dog.ceo", refuse)

    result = await initialized.executor.execute_endpoint("public.dog_ceo.random")

    assert not result.success
    assert result.error.startswith("ConnectError")


@pytest.mark.asyncio
async def test_call_timeout(initialized, upstream):
    upstream.add("https://dog.ceo", json=DOG_IMAGE, delay=1.0)
    executor = make_executor(initialized, timeout=0.05)

    result = await executor.execute_endpoint("public.dog_ceo.random")

    assert not result.success
    assert "timed out" in result.error
    assert 40 <= result.duration_ms < 1000


@pytest.mark.asyncio
async def test_sequential_flow_runs_all_steps(initialized, upstream):
    result = await initialized.executor.execute_flow("weather-and-joke")

    assert result.success
    assert [s.api_name for s in result.steps] == ["Open-Meteo", "JokeAPI"]
    assert not result.parallel
    forecast_url = upstream.urls()[0]
    assert forecast_url.startswith("https://api.open-meteo.com/v1/forecast?latitude=40.7128&longitude=-74.006")


@pytest.mark.asyncio
async def test_required_step_failure_stops_flow(initialized, upstream):
    upstream.add("https://api.open-meteo.com", status_code=500)

    result = await initialized.executor.execute_flow("weather-and-joke")

    assert not result.success
    assert len(result.steps) == 1
    assert not any(url.startswith("https://v2.jokeapi.dev") for url in upstream.urls())


@pytest.mark.asyncio
async def test_optional_step_failure_continues(initialized, upstream):
    upstream.add("https://swapi.dev", status_code=503)

    result = await initialized.executor.execute_flow("geek-pack")

    assert [s.success for s in result.steps] == [True, False, True]
    assert not result.success


@pytest.mark.asyncio
async def test_caller_params_override_step_params(initialized, upstream):
    await initialized.executor.execute_flow("weather-and-joke", {"step-1": {"lat": 51.5, "lon": -0.12}})

    assert "latitude=51.5&longitude=-0.12" in upstream.urls()[0]


@pytest.mark.asyncio
async def test_step_params_fall_back_to_endpoint_key(initialized):
    step = initialized.composer.get_flow("weather-and-joke").steps[0]

    merged = Executor.step_params(step, {"public.open_meteo.forecast": {"lat": 1}})

    assert merged == {"lat": 1, "lon": -74.0060}


@pytest.mark.asyncio
async def test_unknown_flow(initialized):
    result = await initialized.executor.execute_flow("nope")

    assert not result.success
    assert result.flow_name == "Unknown"
    assert result.steps == []


@pytest.mark.asyncio
async def test_parallel_flow_is_concurrent(initialized, upstream):
    for prefix in ("https://dog.ceo", "https://catfact.ninja", "https://api.quotable.io"):
        upstream.add(prefix, json={"ok": True}, delay=0.3)

    result = await initialized.executor.execute_parallel_flow("fun-facts")

    assert result.success
    assert result.parallel
    assert [s.api_name for s in result.steps] == ["Dog CEO", "Cat Facts", "Quotable"]
    assert result.total_duration_ms < 750


@pytest.mark.asyncio
async def test_parallel_flow_deadline(initialized, upstream):
    upstream.add("https://v2.jokeapi.dev", json={"joke": "late"}, delay=1.0)
    executor = make_executor(initialized, flow_timeout=0.1)

    result = await executor.execute_parallel_flow("weather-and-joke")

    assert result.timed_out
    assert not result.success
    assert result.steps[0].success
    assert "deadline" in result.steps[1].error
    assert result.steps[1].api_name == "JokeAPI"


@pytest.mark.asyncio
async def test_sequential_flow_deadline(initialized, upstream):
    upstream.add("https://api.open-meteo.com", json={}, delay=1.0)
    executor = make_executor(initialized, flow_timeout=0.1)

    result = await executor.execute_flow("weather-and-joke")

    assert result.timed_out
    assert len(result.steps) == 1
    assert "deadline" in result.steps[0].error


@pytest.mark.asyncio
async def test_quick_demo_uses_parameterless_endpoints(initialized, upstream):
    result = await initialized.executor.quick_demo()

    assert result["success"]
    assert 0 < len(result["results"]) <= 3
    assert result["message"] == f"Executed {len(result['results'])}/{len(result['results'])} API calls successfully"
    assert all("{" not in url for url in upstream.urls())


@pytest.mark.asyncio
async def test_executable_listing(initialized):
    endpoints = {e["key"]: e for e in initialized.executor.executable_endpoints()}

    assert endpoints["public.dog_ceo.breed"]["requiredParams"] == ["breed"]
    assert "public.openweathermap.default" not in endpoints
    assert len(initialized.executor.executable_flows()) == len(initialized.composer.list_auto_flows())
