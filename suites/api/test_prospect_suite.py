"""
オンボーディング API スイート — 見込み客情報の取得

api.token と api.subscriptionKey の設定が必要（未設定ならスキップ）。
"""

from __future__ import annotations

import allure
import pytest

from qat import constants

pytestmark = [pytest.mark.api, allure.feature("Onboarding API")]


@pytest.fixture
def onboarding_api(api_client, qat_config):
    if not (qat_config.get("api.token") and qat_config.get("api.subscriptionKey")):
        pytest.skip("api.token / api.subscriptionKey が設定されていません")
    api_client.set_base_url(qat_config.get("api.onboardingUrl", constants.ONBOARDING_API_URL))
    return api_client


class TestProspect:
    """見込み客 API のテスト。"""

    def test_get_prospect(self, onboarding_api):
        """見込み客の名前・所在地が期待値と一致すること。"""
        response = onboarding_api.get(f"/prospects/{constants.PROSPECT_ID}/get")
        onboarding_api.validate_status_code(response, 200)

        onboarding_api.validate_json_field(response, "data.id", constants.PROSPECT_ID)
        onboarding_api.validate_json_field(response, "data.accountName", constants.EXPECTED_PROSPECT_NAME)
        onboarding_api.validate_json_field(response, "data.address.city", constants.EXPECTED_PROSPECT_CITY)
        onboarding_api.validate_json_field(response, "data.address.stateCode", constants.EXPECTED_PROSPECT_STATE)
        onboarding_api.log_response(response)
