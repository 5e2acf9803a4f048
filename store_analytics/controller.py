import json
import logging

from flask import Flask, request
from flask_cors import CORS

import store_analytics.controller_utility as controller_util
import store_analytics.store_report as store_report
from store_analytics.config import Thresholds
from store_analytics.data_loader import DataLoader
from store_analytics.report_formatter import format_store_report
from store_analytics.validator import ReportValidator

app = Flask(__name__)

cors = CORS(app, resources={r"/*": {"origins": "*"}})


def error_response(message: str, status: int):
    return app.response_class(
        response=json.dumps({"error": message}),
        status=status,
        mimetype='application/json'
    )


def load_config():
    """Config from an uploaded 'configFile', else from a 'configUrl' parameter, else None."""
    if 'configFile' in request.files:
        return controller_util.load_yaml_from_stream(request.files['configFile'])
    config_url = request.args.get('configUrl') or request.form.get('configUrl')
    if config_url:
        return controller_util.load_yaml_from_url(config_url)
    return None


def load_data():
    """Records from an uploaded 'dataFile', else from the JSON request body, else None."""
    if 'dataFile' in request.files:
        return request.files['dataFile']
    return request.get_json(silent=True)


@app.route('/store-report', methods=['POST'])
def get_store_report():
    """
    A flask endpoint, build store performance summaries for the posted records.
    :return: A json response with one summary per store, or a plain-text report when format=text
    """
    try:
        period_from, period_to, previous_from = ReportValidator.validate_window(
            request.args.get('from'), request.args.get('to'), request.args.get('previousFrom'))
    except ValueError as e:
        return error_response(e.__str__(), 400)

    output_format = (request.args.get('format') or 'json').lower()
    if output_format not in ('json', 'text'):
        return error_response(f"Unsupported format {output_format}, expected json or text", 400)

    try:
        cfg = load_config()
        ReportValidator(cfg).validate_yaml()
    except (KeyError, ValueError, ConnectionError) as e:
        logging.error(e, exc_info=True)
        return error_response(f"Invalid configuration provided: {e.__str__()}", 400)

    data = load_data()
    if data is None and not ((cfg or {}).get('setup') or {}).get('data_path'):
        return error_response("No input records provided, post a JSON bundle or a 'dataFile'", 400)

    try:
        summaries = process_input(data, cfg, period_from, period_to, previous_from, request.args.get('storeId'))
    except Exception as e:
        logging.error(e, exc_info=True)
        return error_response(e.__str__(), 500)

    if output_format == 'text':
        return app.response_class(
            response=format_store_report(summaries, period_from, period_to,
                                         timezone=Thresholds.from_config(cfg).timezone),
            status=200,
            mimetype='text/plain'
        )
    return app.response_class(
        response=json.dumps(summaries, indent=4, cls=controller_util.Encoder),
        status=200,
        mimetype='application/json'
    )


def process_input(data, cfg, period_from, period_to, previous_from=None, store_id=None):
    try:
        data_loader = DataLoader(cfg=cfg, data=data)
    except Exception as e:
        logging.error(e, exc_info=True)
        raise Exception(f"Could not load input records due to: {e.__str__()}")

    try:
        return store_report.analyze_store_data(
            data_loader.records, period_from, period_to, previous_from=previous_from, cfg=cfg, store_id=store_id)
    except Exception as error:
        logging.error(error, exc_info=True)
        raise Exception(f"Could not create store report due to: {error.__str__()}")


def start():
    return app


if __name__ == "__main__":
    app.run(debug=False, port=5001, host='0.0.0.0')
