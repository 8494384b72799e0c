from swap_deployment.orchestrator import DeploymentFailed, Orchestrator
from swap_deployment.report import print_report


def test_report_of_successful_run(saed_swap_plan, client, capsys):
    results = Orchestrator(client=client).run(saed_swap_plan)
    print_report(results)
    output = capsys.readouterr().out
    for index, result in enumerate(results, start=1):
        assert f"{index}. {result.name} {result.address}" in output
    assert "FAILED" not in output


def test_report_of_failed_run(saed_swap_plan, client, capsys):
    results = Orchestrator(client=client).run(saed_swap_plan[:2])
    failure = DeploymentFailed(name="USDT", cause=TimeoutError("timed out"), results=results)
    print_report(failure.results, failure=failure)
    output = capsys.readouterr().out
    assert "3. USDT FAILED: Deployment of USDT failed: timed out" in output
    assert "remain deployed on chain" in output
